from .shopify_client import ShopifyClient
from .payload_utils import normalize_shopify_product
from .errors import ShopifyError, ShopifyGraphQLError


__all__ = ["ShopifyClient", "normalize_shopify_product", "ShopifyError", "ShopifyGraphQLError"]
