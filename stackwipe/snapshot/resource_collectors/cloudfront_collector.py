"""CloudFront distribution collector."""

from __future__ import annotations

from ...models.resource_kind import ResourceKind
from .base import BaseResourceCollector
from .pagination import PageSpec


class CloudFrontCollector(BaseResourceCollector):
    """Collector for CloudFront distributions."""

    kind = ResourceKind.CLOUDFRONT_DISTRIBUTION
    page_size = 20

    def page_spec(self) -> PageSpec:
        # The listing is wrapped in DistributionList, and Items is absent
        # when the account has no distributions.
        return PageSpec(
            operation="list_distributions",
            items=lambda page: page.get("DistributionList", {}).get("Items", []),
            page_size=self.page_size,
        )
