from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional


def gid_tail(gid: Any) -> str:
    """'gid://shopify/Product/123' -> '123'; plain ids pass through."""
    return str(gid or "").rsplit("/", 1)[-1]


def normalize_tags(value: Any) -> Optional[str]:
    """
    Tags as stored on products.tags: a JSON list of trimmed, non-empty tags.
    A raw string is kept as-is; anything else is None.
    """
    if isinstance(value, list):
        return json.dumps([str(v).strip() for v in value if v is not None and str(v).strip()])
    if isinstance(value, str):
        return value
    return None


def normalize_price(value: Any, default: Optional[str] = None) -> Optional[Decimal]:
    """Shopify money string -> Decimal(2dp); unparsable falls back to `default`."""
    if value in (None, ""):
        return Decimal(default) if default is not None else None
    try:
        return Decimal(str(value)).quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal(default) if default is not None else None


def _edges(conn: Any) -> List[Dict[str, Any]]:
    if not isinstance(conn, dict):
        return []
    return [e.get("node") or {} for e in (conn.get("edges") or []) if isinstance(e, dict)]


def normalize_variant(node: Dict[str, Any]) -> Dict[str, Any]:
    opts = node.get("selectedOptions") or []
    values = [o.get("value") for o in opts[:3]] + [None] * (3 - min(3, len(opts)))
    try:
        qty = int(node.get("inventoryQuantity") or 0)
    except (TypeError, ValueError):
        qty = 0
    return {
        "source_variant_id": gid_tail(node.get("id")),
        "sku": node.get("sku") or None,
        "price": normalize_price(node.get("price"), default="0.00"),
        "compare_at_price": normalize_price(node.get("compareAtPrice")),
        "option1": values[0],
        "option2": values[1],
        "option3": values[2],
        "inventory_quantity": qty,
    }


'''
  One products-connection node -> the dict product_repo.upsert_product expects:
    source / source_product_id / title / description_html / status / handle /
    tags / product_type / vendor / variants[] / images[]
'''
def normalize_shopify_product(node: Dict[str, Any]) -> Dict[str, Any]:
    images = []
    for index, img in enumerate(_edges(node.get("images"))):
        src = img.get("url") or img.get("src")
        if not src:
            continue
        images.append({"src": src, "position": index, "alt": img.get("altText")})

    return {
        "source": "shopify",
        "source_product_id": gid_tail(node.get("id")),
        "title": node.get("title") or "",
        "description_html": node.get("descriptionHtml") or None,
        "status": str(node.get("status") or "active").lower(),
        "handle": node.get("handle") or None,
        "tags": normalize_tags(node.get("tags") or []),
        "product_type": node.get("productType") or None,
        "vendor": node.get("vendor") or None,
        "variants": [normalize_variant(v) for v in _edges(node.get("variants"))],
        "images": images,
    }
