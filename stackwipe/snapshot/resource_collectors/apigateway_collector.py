"""API Gateway REST API collector."""

from __future__ import annotations

from ...models.resource_kind import ResourceKind
from .base import BaseResourceCollector
from .pagination import PageSpec


class ApiGatewayCollector(BaseResourceCollector):
    """Collector for API Gateway REST APIs."""

    kind = ResourceKind.API_GATEWAY
    page_size = 10

    def page_spec(self) -> PageSpec:
        return PageSpec(
            operation="get_rest_apis",
            items=lambda page: page.get("items", []),
            page_size=self.page_size,
        )
