"""IAM role collector."""

from __future__ import annotations

from typing import Iterable, Optional

import boto3

from ...models.resource_kind import ResourceKind
from .base import BaseResourceCollector
from .pagination import PageSpec

# Roles AWS creates and manages itself; never deployment artifacts.
RESERVED_ROLE_PREFIXES = ("AWSService", "OrganizationAccount")


def is_reserved_role(role_name: str, prefixes: Iterable[str] = RESERVED_ROLE_PREFIXES) -> bool:
    """Check whether a role name carries a reserved system-role prefix."""
    return any(role_name.startswith(prefix) for prefix in prefixes)


class IamRoleCollector(BaseResourceCollector):
    """Collector for IAM roles."""

    kind = ResourceKind.IAM_ROLE
    page_size = 100

    def __init__(
        self,
        session: boto3.Session,
        region: str,
        extra_reserved_prefixes: Optional[Iterable[str]] = None,
    ) -> None:
        super().__init__(session, region)
        self.reserved_prefixes = RESERVED_ROLE_PREFIXES + tuple(extra_reserved_prefixes or ())

    def page_spec(self) -> PageSpec:
        return PageSpec(
            operation="list_roles",
            items=lambda page: page.get("Roles", []),
            page_size=self.page_size,
        )

    def include(self, record: dict) -> bool:
        return not is_reserved_role(record.get("RoleName", ""), self.reserved_prefixes)
