# Shared ORM base + constraint naming convention

from __future__ import annotations
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.schema import MetaData

# Stable constraint/index names so Alembic autogenerate produces predictable diffs.
# uq uses every column name: products carries a composite (brand_id, source_product_id) key.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


# Every mapped table (Brand, Product, ProductVariant, ProductImage) inherits from Base
# so it lands in Base.metadata.
class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
