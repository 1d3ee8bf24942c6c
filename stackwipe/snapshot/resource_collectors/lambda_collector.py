"""Lambda function collector."""

from __future__ import annotations

from ...models.resource_kind import ResourceKind
from .base import BaseResourceCollector
from .pagination import PageSpec


class LambdaCollector(BaseResourceCollector):
    """Collector for Lambda functions."""

    kind = ResourceKind.LAMBDA_FUNCTION
    page_size = 10

    def page_spec(self) -> PageSpec:
        return PageSpec(
            operation="list_functions",
            items=lambda page: page.get("Functions", []),
            page_size=self.page_size,
        )
