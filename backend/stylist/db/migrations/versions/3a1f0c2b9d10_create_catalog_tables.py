"""create brand / product catalog tables

Revision ID: 3a1f0c2b9d10
Revises:
Create Date: 2025-02-10 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3a1f0c2b9d10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'brands',
        sa.Column('id', sa.String(length=36), primary_key=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('shop_domain', sa.String(length=255), nullable=True),
        sa.Column('website_url', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('last_synced_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )
    op.create_index('ix_brands_shop_domain', 'brands', ['shop_domain'], unique=True)

    op.create_table(
        'products',
        sa.Column('id', sa.String(length=36), primary_key=True, nullable=False),
        sa.Column('brand_id', sa.String(length=36), sa.ForeignKey('brands.id', ondelete='CASCADE'), nullable=False),
        sa.Column('source', sa.String(length=32), nullable=False, server_default='shopify'),
        sa.Column('source_product_id', sa.String(length=64), nullable=False),
        sa.Column('handle', sa.String(length=255), nullable=True),
        sa.Column('title', sa.Text(), nullable=False, server_default=''),
        sa.Column('description_html', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='active'),
        sa.Column('tags', sa.Text(), nullable=True),
        sa.Column('product_type', sa.String(length=255), nullable=True),
        sa.Column('vendor', sa.String(length=255), nullable=True),
        sa.Column('gender', sa.String(length=32), nullable=True),
        sa.Column('category_lvl1', sa.String(length=64), nullable=True),
        sa.Column('color_primary', sa.String(length=64), nullable=True),
        sa.Column('embedding', sa.Text(), nullable=True),
        sa.Column('enrichment_status', sa.String(length=16), nullable=True, server_default='pending'),
        sa.Column('enrichment_error', sa.Text(), nullable=True),
        sa.Column('enriched_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('synced_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.UniqueConstraint('brand_id', 'source_product_id', name='uq_products_brand_id_source_product_id'),
    )
    op.create_index('ix_products_brand_id', 'products', ['brand_id'])
    op.create_index('idx_products_enrichment_status', 'products', ['enrichment_status'])

    op.create_table(
        'product_variants',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('product_id', sa.String(length=36), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('source_variant_id', sa.String(length=64), nullable=True),
        sa.Column('sku', sa.String(length=255), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default=sa.text('0')),
        sa.Column('compare_at_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('option1', sa.String(length=255), nullable=True),
        sa.Column('option2', sa.String(length=255), nullable=True),
        sa.Column('option3', sa.String(length=255), nullable=True),
        sa.Column('inventory_quantity', sa.Integer(), nullable=False, server_default=sa.text('0')),
    )
    op.create_index('ix_product_variants_product_id', 'product_variants', ['product_id'])

    op.create_table(
        'product_images',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('product_id', sa.String(length=36), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('src', sa.Text(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('alt', sa.Text(), nullable=True),
    )
    op.create_index('ix_product_images_product_id', 'product_images', ['product_id'])


def downgrade() -> None:
    op.drop_index('ix_product_images_product_id', table_name='product_images')
    op.drop_table('product_images')
    op.drop_index('ix_product_variants_product_id', table_name='product_variants')
    op.drop_table('product_variants')
    op.drop_index('idx_products_enrichment_status', table_name='products')
    op.drop_index('ix_products_brand_id', table_name='products')
    op.drop_table('products')
    op.drop_index('ix_brands_shop_domain', table_name='brands')
    op.drop_table('brands')
