# Import every model here so Alembic (and create_all) see the full metadata

from .brand import Brand
from .product import (
    Product,
    ProductVariant,
    ProductImage,
)

__all__ = [
    "Brand",
    "Product", "ProductVariant", "ProductImage",
]
