
# GraphQL documents for the Admin API


# connectivity probe (token / shop domain / API version)
SHOP_PING = """
{
  shop {
    name
    myshopifyDomain
  }
}
""".strip()


# catalog page for the brand sync; cursor-paginated via $after
# images / variants are capped per product (10 / 100), enough for fashion catalogs
PRODUCTS_PAGE = """
query ProductsPage($first: Int!, $after: String, $imagesFirst: Int!, $variantsFirst: Int!) {
  products(first: $first, after: $after) {
    pageInfo {
      hasNextPage
      endCursor
    }
    edges {
      node {
        id
        title
        handle
        status
        descriptionHtml
        tags
        productType
        vendor
        images(first: $imagesFirst) {
          edges {
            node { url altText }
          }
        }
        variants(first: $variantsFirst) {
          edges {
            node {
              id
              sku
              price
              compareAtPrice
              inventoryQuantity
              selectedOptions { name value }
            }
          }
        }
      }
    }
  }
}
""".strip()
