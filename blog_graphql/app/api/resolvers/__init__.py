"""Resolver map bound to the GraphQL schema."""

from blog_graphql.app.api.resolvers.mutation import mutation
from blog_graphql.app.api.resolvers.query import query
from blog_graphql.app.api.resolvers.subscription import subscription
from blog_graphql.app.api.resolvers.types import comment_type, post_type, user_type

resolvers = [query, mutation, subscription, user_type, post_type, comment_type]
