
"""Per-store Admin GraphQL client: connectivity probe + paginated catalog read"""
from __future__ import annotations

import time, logging, requests
from typing import Any, Dict, Iterator, Optional
from requests import HTTPError, Timeout, RequestException

from stylist.core.config import settings
from stylist.integrations.shopify.errors import ShopifyGraphQLError
from stylist.integrations.shopify.graphql_queries import PRODUCTS_PAGE, SHOP_PING


logger = logging.getLogger(__name__)



class ShopifyClient:

    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        *,
        api_version: Optional[str] = None,
        timeout: Optional[int] = None,
        max_retries: Optional[int] = None,
        backoff_ms: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        if not shop_domain:
            raise ValueError("shop_domain is required")
        if not access_token:
            raise ValueError("access_token is required")

        self.shop_domain = shop_domain.strip().removeprefix("https://").rstrip("/")
        self.access_token = access_token
        self.api_version = api_version or settings.SHOPIFY_API_VERSION
        self.timeout = timeout or settings.SHOPIFY_HTTP_TIMEOUT
        self.max_retries = max(0, int(settings.SHOPIFY_HTTP_RETRIES if max_retries is None else max_retries))
        self.backoff_ms = max(50, int(backoff_ms or settings.SHOPIFY_HTTP_BACKOFF_MS))
        self.http = session or requests.Session()


    # ---------------- endpoint & auth ----------------

    @property
    def endpoint(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self.api_version}/graphql.json"


    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self.access_token,
            "User-Agent": "StylistBackend/ShopifyClient (+python)",
        }


    def _sleep_backoff(self, attempt: int) -> None:
        time.sleep((self.backoff_ms / 1000.0) * (2 ** attempt))


    '''
    GraphQL POST with logging + retries, shared by every query method.
        - returns the full response body; callers pick data[...] themselves
        retry policy:
           1) HTTP 429: honour Retry-After, else exponential backoff
           2) HTTP 5xx, timeouts, connection errors: exponential backoff
           3) HTTP 4xx: raised immediately (requests.HTTPError)
           4) top-level GraphQL errors: ShopifyGraphQLError, no retry
    '''
    def _post_graphql(
        self,
        query: str,
        variables: Optional[dict] = None,
        *,
        op_name: str = "",
    ) -> dict:

        max_retries = self.max_retries
        payload = {"query": query, "variables": variables or {}}
        # log only op_name and variable keys, never the token or query text
        safe_vars_keys = list(payload["variables"].keys())

        for attempt in range(max_retries + 1):
            start = time.perf_counter()
            try:
                resp = self.http.post(
                    self.endpoint,
                    headers=self._headers(),
                    json=payload,
                    timeout=self.timeout,
                )
                latency_ms = int((time.perf_counter() - start) * 1000)

                try:
                    resp.raise_for_status()
                except HTTPError:
                    status = resp.status_code

                    if status == 429 and attempt < max_retries:
                        retry_after = resp.headers.get("Retry-After")
                        try:
                            sleep_s = max(0.1, float(retry_after))
                        except (TypeError, ValueError):
                            sleep_s = (self.backoff_ms / 1000.0) * (2 ** attempt)
                        logger.warning(
                            "shopify.graphql.429_throttled shop=%s op=%s latency_ms=%s attempt=%s/%s retry_after=%s",
                            self.shop_domain, op_name, latency_ms, attempt, max_retries, retry_after)
                        time.sleep(sleep_s)
                        continue

                    logger.warning(
                        "shopify.graphql.http_error shop=%s op=%s status=%s latency_ms=%s attempt=%s/%s",
                        self.shop_domain, op_name, status, latency_ms, attempt, max_retries)

                    if 500 <= status < 600 and attempt < max_retries:
                        self._sleep_backoff(attempt)
                        continue
                    raise

                try:
                    data = resp.json()
                except ValueError:
                    if attempt < max_retries:
                        logger.warning("shopify.graphql.non_json shop=%s op=%s attempt=%s/%s",
                                       self.shop_domain, op_name, attempt, max_retries)
                        self._sleep_backoff(attempt)
                        continue
                    raise ShopifyGraphQLError(f"GraphQL response is not JSON: status={resp.status_code}")

                if data.get("errors"):
                    logger.error(
                        "shopify.graphql.gql_errors shop=%s op=%s latency_ms=%s attempt=%s/%s errors=%s",
                        self.shop_domain, op_name, latency_ms, attempt, max_retries, data["errors"])
                    raise ShopifyGraphQLError(f"GraphQL top-level errors: {data['errors']}", data["errors"])

                logger.info("shopify.graphql.ok shop=%s op=%s latency_ms=%s attempt=%s vars=%s",
                            self.shop_domain, op_name, latency_ms, attempt, safe_vars_keys)
                return data

            except Timeout:
                latency_ms = int((time.perf_counter() - start) * 1000)
                logger.warning("shopify.graphql.timeout shop=%s op=%s latency_ms=%s attempt=%s/%s",
                               self.shop_domain, op_name, latency_ms, attempt, max_retries)
                if attempt == max_retries:
                    raise
                self._sleep_backoff(attempt)

            except HTTPError:
                raise

            except RequestException as e:
                latency_ms = int((time.perf_counter() - start) * 1000)
                logger.warning("shopify.graphql.request_exception shop=%s op=%s latency_ms=%s attempt=%s/%s err=%s",
                               self.shop_domain, op_name, latency_ms, attempt, max_retries, type(e).__name__)
                if attempt == max_retries:
                    raise
                self._sleep_backoff(attempt)

        # only reachable when every attempt ended in `continue`
        raise ShopifyGraphQLError(f"GraphQL request gave up after {max_retries + 1} attempts: op={op_name}")


    def ping(self) -> dict:
        return self._post_graphql(SHOP_PING, op_name="shop.ping")


    def iter_products(
        self,
        *,
        page_size: Optional[int] = None,
        images_first: int = 10,
        variants_first: int = 100,
    ) -> Iterator[Dict[str, Any]]:
        """
        Yield raw product nodes across every page of the products connection.
        Stops when pageInfo.hasNextPage is false. Page errors propagate, so a
        partially consumed iterator means a partially synced catalog.
        """
        first = page_size or settings.SHOPIFY_SYNC_PAGE_SIZE
        cursor: Optional[str] = None
        page = 0

        while True:
            variables = {
                "first": first,
                "after": cursor,
                "imagesFirst": images_first,
                "variantsFirst": variants_first,
            }
            data = self._post_graphql(PRODUCTS_PAGE, variables, op_name="products.page")

            conn = (data.get("data") or {}).get("products")
            if conn is None:
                raise ShopifyGraphQLError("GraphQL response has no data.products")

            edges = conn.get("edges") or []
            page += 1
            logger.debug("shopify.products.page shop=%s page=%s count=%s", self.shop_domain, page, len(edges))

            for edge in edges:
                node = (edge or {}).get("node")
                if node:
                    yield node

            page_info = conn.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info.get("endCursor")
            if not cursor:
                raise ShopifyGraphQLError("hasNextPage without endCursor")
