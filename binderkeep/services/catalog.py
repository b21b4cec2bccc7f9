"""
Pokemon TCG catalog client.

Read-only source of set and card metadata used to seed tracked sets.
The catalog caps page size at 250, so large sets are fetched page by page.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from binderkeep.config import MAX_CATALOG_PAGE_SIZE, settings
from binderkeep.models.catalog import CatalogCard, CatalogSet

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogError(Exception):
    """Raised when the catalog is unreachable or returns an error."""

    pass


def _parse_page(response: httpx.Response, path: str) -> tuple[list[dict[str, Any]], int | None]:
    """Return a page's items and totalCount; reject bodies that are not a catalog page."""
    try:
        body = response.json()
    except ValueError as e:
        logger.warning("Catalog returned a non-JSON body for %s", path)
        raise CatalogError(f"Catalog request {path} returned malformed JSON") from e

    batch = body.get("data", []) if isinstance(body, dict) else None
    if not isinstance(batch, list) or not all(isinstance(item, dict) for item in batch):
        logger.warning("Catalog returned an unexpected body for %s", path)
        raise CatalogError(f"Catalog request {path} returned an unexpected body")

    total = body.get("totalCount")
    if not isinstance(total, int):
        total = None
    return batch, total


def _build(
    from_api: Callable[[dict[str, Any]], T], items: list[dict[str, Any]], path: str
) -> list[T]:
    try:
        return [from_api(item) for item in items]
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Catalog entry from %s is missing fields: %s", path, e)
        raise CatalogError(f"Catalog request {path} returned an incomplete entry") from e


class CatalogClient:
    """
    Client for the Pokemon TCG catalog API.

    Each call opens its own connection with a bounded timeout.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        page_size: int | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize the catalog client.

        Args:
            base_url: Catalog API base URL. Defaults to settings.catalog_api_url.
            api_key: Optional API key sent as X-Api-Key. Defaults to settings.
            page_size: Results per page, capped at the catalog maximum.
            timeout: Request timeout in seconds.
        """
        self.base_url = (base_url or settings.catalog_api_url).rstrip("/")
        self.api_key = settings.catalog_api_key if api_key is None else api_key
        self.page_size = min(page_size or settings.catalog_page_size, MAX_CATALOG_PAGE_SIZE)
        self.timeout = settings.catalog_timeout if timeout is None else timeout

    def _headers(self) -> dict[str, str]:
        return {"X-Api-Key": self.api_key} if self.api_key else {}

    async def _get_all_pages(self, path: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        """
        Fetch every page of a list endpoint and concatenate the results.

        Stops when the accumulated count reaches totalCount, or when a page
        comes back short or empty.

        Raises:
            CatalogError: If any request fails or a page is malformed
        """
        items: list[dict[str, Any]] = []
        url = f"{self.base_url}{path}"
        page = 1

        try:
            async with httpx.AsyncClient(timeout=self.timeout, headers=self._headers()) as client:
                while True:
                    response = await client.get(
                        url, params={**params, "page": page, "pageSize": self.page_size}
                    )
                    response.raise_for_status()
                    batch, total = _parse_page(response, path)
                    items.extend(batch)

                    if not batch or len(batch) < self.page_size:
                        break
                    if total is not None and len(items) >= total:
                        break
                    page += 1
        except httpx.HTTPStatusError as e:
            logger.warning("Catalog returned HTTP %d for %s", e.response.status_code, path)
            raise CatalogError(
                f"Catalog request {path} failed: HTTP {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            logger.warning("Catalog request %s failed: %s", path, e)
            raise CatalogError(f"Catalog request {path} failed: {e}") from e

        logger.debug("Fetched %d items from %s in %d page(s)", len(items), path, page)
        return items

    async def list_sets(self, name_filter: str | None = None) -> list[CatalogSet]:
        """
        List catalog sets ordered by release date.

        Args:
            name_filter: Optional case-insensitive substring of the set name

        Returns:
            List of CatalogSet, oldest release first

        Raises:
            CatalogError: If the catalog request fails or returns malformed data
        """
        raw_sets = await self._get_all_pages("/sets", {"orderBy": "releaseDate"})
        sets = _build(CatalogSet.from_api, raw_sets, "/sets")

        if name_filter:
            needle = name_filter.lower()
            sets = [s for s in sets if needle in s.name.lower()]

        return sets

    async def list_cards(self, set_api_id: str) -> list[CatalogCard]:
        """
        List every card in a catalog set.

        Args:
            set_api_id: Catalog set id (e.g. "sv1")

        Returns:
            List of CatalogCard in catalog order

        Raises:
            CatalogError: If the catalog request fails or returns malformed data
        """
        raw_cards = await self._get_all_pages("/cards", {"q": f"set.id:{set_api_id}"})
        return _build(CatalogCard.from_api, raw_cards, "/cards")
