"""CloudWatch Logs log group collector."""

from __future__ import annotations

from typing import Optional

import boto3

from ...models.resource_kind import ResourceKind
from .base import BaseResourceCollector
from .pagination import PageSpec

DEFAULT_LOG_GROUP_PREFIX = "/aws/"


class LogGroupCollector(BaseResourceCollector):
    """Collector for CloudWatch log groups.

    Only log groups under a name prefix are listed; by default the ones AWS
    services create for their resources ("/aws/lambda/...", "/aws/apigateway/...").
    """

    kind = ResourceKind.LOG_GROUP
    page_size = 50

    def __init__(self, session: boto3.Session, region: str, prefix: Optional[str] = DEFAULT_LOG_GROUP_PREFIX) -> None:
        super().__init__(session, region)
        self.prefix = prefix

    def page_spec(self) -> PageSpec:
        return PageSpec(
            operation="describe_log_groups",
            items=lambda page: page.get("logGroups", []),
            params={"logGroupNamePrefix": self.prefix} if self.prefix else {},
            page_size=self.page_size,
        )
