
"""
   Shopify Admin API exception types.
   HTTP failures left after retries surface as requests.HTTPError / Timeout;
   these cover responses that arrived but cannot be used.
"""

class ShopifyError(Exception):
    """Base for Shopify integration errors."""

class ShopifyGraphQLError(ShopifyError):
    """Top-level GraphQL `errors`, a non-JSON body, or a missing `data` node."""

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = errors
