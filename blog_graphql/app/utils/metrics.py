"""Prometheus metrics for the GraphQL server."""

from prometheus_client import Counter

graphql_context_builds_total = Counter(
    "graphql_context_builds_total",
    "Total request contexts built for GraphQL operations",
)

pubsub_messages_published_total = Counter(
    "pubsub_messages_published_total",
    "Total messages published on the event bus",
    ["backend"],
)
