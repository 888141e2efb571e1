"""Normalization of Shopify products-connection nodes."""

from decimal import Decimal

from stylist.integrations.shopify.payload_utils import (
    gid_tail, normalize_price, normalize_shopify_product, normalize_tags,
)


def test_gid_tail():
    assert gid_tail("gid://shopify/Product/8123456789") == "8123456789"
    assert gid_tail("42") == "42"
    assert gid_tail(None) == ""


def test_normalize_tags():
    assert normalize_tags([" a ", "", None, "b"]) == '["a", "b"]'
    assert normalize_tags([]) == "[]"
    assert normalize_tags("raw,string") == "raw,string"
    assert normalize_tags(7) is None


def test_normalize_price():
    assert normalize_price("19.9") == Decimal("19.90")
    assert normalize_price(None) is None
    assert normalize_price("", default="0.00") == Decimal("0.00")
    assert normalize_price("n/a", default="0.00") == Decimal("0.00")


def test_minimal_node_gets_defaults():
    out = normalize_shopify_product({"id": "gid://shopify/Product/5"})
    assert out["source"] == "shopify"
    assert out["source_product_id"] == "5"
    assert out["title"] == ""
    assert out["status"] == "active"
    assert out["tags"] == "[]"
    assert out["variants"] == [] and out["images"] == []


def test_full_node():
    node = {
        "id": "gid://shopify/Product/9",
        "title": "Wrap Dress",
        "handle": "wrap-dress",
        "status": "DRAFT",
        "descriptionHtml": "<p>Midi</p>",
        "tags": ["dress"],
        "productType": "Dress",
        "vendor": "Studio",
        "images": {"edges": [{"node": {"url": "https://cdn/x.jpg", "altText": "x"}}, {"node": {"url": None}}]},
        "variants": {"edges": [{"node": {
            "id": "gid://shopify/ProductVariant/91",
            "sku": "",
            "price": "120.00",
            "compareAtPrice": "150",
            "inventoryQuantity": "3",
            "selectedOptions": [
                {"name": "Size", "value": "S"},
                {"name": "Color", "value": "Red"},
                {"name": "Fabric", "value": "Silk"},
                {"name": "Extra", "value": "ignored"},
            ],
        }}]},
    }
    out = normalize_shopify_product(node)

    assert out["status"] == "draft"
    assert out["description_html"] == "<p>Midi</p>"
    assert out["product_type"] == "Dress"
    assert out["images"] == [{"src": "https://cdn/x.jpg", "position": 0, "alt": "x"}]

    variant = out["variants"][0]
    assert variant["source_variant_id"] == "91"
    assert variant["sku"] is None
    assert variant["price"] == Decimal("120.00")
    assert variant["compare_at_price"] == Decimal("150.00")
    assert variant["inventory_quantity"] == 3
    assert (variant["option1"], variant["option2"], variant["option3"]) == ("S", "Red", "Silk")
