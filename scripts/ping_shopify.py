
import sys

from stylist.integrations.shopify.shopify_client import ShopifyClient


def main():
    if len(sys.argv) != 3:
        print("usage: python scripts/ping_shopify.py <shop>.myshopify.com <admin-access-token>")
        sys.exit(2)
    cli = ShopifyClient(sys.argv[1], sys.argv[2])
    print(cli.ping())


if __name__ == "__main__":
    main()


# run (backend/ on PYTHONPATH, or after `pip install -e .`)
# python scripts/ping_shopify.py my-brand.myshopify.com shpat_xxx

# shop.name / myshopifyDomain in the output means domain, API version and token are OK
