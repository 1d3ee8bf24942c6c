"""S3 bucket collector."""

from __future__ import annotations

from ...models.resource_kind import ResourceKind
from .base import BaseResourceCollector
from .pagination import PageSpec


class S3BucketCollector(BaseResourceCollector):
    """Collector for S3 buckets.

    ListBuckets returns every bucket the account owns whatever the client's
    region, so only one listing is needed.
    """

    kind = ResourceKind.BUCKET
    page_size = 1000

    def page_spec(self) -> PageSpec:
        return PageSpec(
            operation="list_buckets",
            items=lambda page: page.get("Buckets", []),
            page_size=self.page_size,
        )
