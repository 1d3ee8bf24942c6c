"""Paginated listing helper shared by all collectors.

AWS list calls disagree on how they signal "more data" (NextMarker,
IsTruncated plus Marker, API Gateway's "position"). boto3's paginators know
each convention; a PageSpec only names the operation, its fixed parameters,
the page size and where the items sit in a page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Iterator, Optional

from botocore.exceptions import PaginationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageSpec:
    """Shape of one paginated list operation.

    Attributes:
        operation: boto3 client method name, e.g. "list_functions"
        items: Extracts the page's items from a response
        params: Fixed request parameters sent with every page
        page_size: Items per request (None for the service default)
    """

    operation: str
    items: Callable[[dict], list]
    params: dict = field(default_factory=dict)
    page_size: Optional[int] = None


def iter_pages(client: Any, spec: PageSpec) -> Iterator[dict]:
    """Yield raw response pages of a list operation, one request each."""
    paginator = client.get_paginator(spec.operation)
    pagination_config = {"PageSize": spec.page_size} if spec.page_size else {}
    return iter(paginator.paginate(**spec.params, PaginationConfig=pagination_config))


def drain_pages(
    client: Any,
    spec: PageSpec,
    key: Optional[Callable[[Any], Hashable]] = None,
) -> list:
    """Collect the items of every page of a list operation.

    Items already seen (by key) are not added twice. A continuation token the
    service hands back twice ends the listing with what was gathered so far.
    Errors from the calls themselves propagate.

    Args:
        client: boto3 client
        spec: Operation and page shape
        key: Identity of an item, used to drop duplicates (optional)

    Returns:
        All items across all pages, in the order returned
    """
    items: list = []
    seen_keys: set = set()

    try:
        for page in iter_pages(client, spec):
            for item in spec.items(page) or []:
                if key is not None:
                    item_key = key(item)
                    if item_key in seen_keys:
                        continue
                    seen_keys.add(item_key)
                items.append(item)
    except PaginationError as e:
        logger.warning(f"Stopped listing {spec.operation} after {len(items)} items: {e}")

    return items
