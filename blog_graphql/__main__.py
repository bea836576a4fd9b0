"""Run the server with ``python -m blog_graphql``."""

import sys

from blog_graphql.app.main import main

if __name__ == "__main__":
    sys.exit(main())
