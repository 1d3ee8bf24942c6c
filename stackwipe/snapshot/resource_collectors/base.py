"""Base class for resource collectors."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import boto3

from ...aws.client import DEFAULT_BOTO_CONFIG
from ...models.resource_kind import ResourceKind
from .pagination import PageSpec, drain_pages


class BaseResourceCollector(ABC):
    """Lists every resource of one kind visible to the session.

    Subclasses describe their list operation as a PageSpec; collect() drains
    all pages, filters, and sorts newest first. Listing errors are not caught:
    discovery is read-only and can simply be re-run.
    """

    kind: ResourceKind
    page_size: int

    def __init__(self, session: boto3.Session, region: str) -> None:
        self.session = session
        self.region = region
        self.logger = logging.getLogger(f"{__name__}.{type(self).__name__}")

    @property
    def service_name(self) -> str:
        return self.kind.info.service

    def _create_client(self) -> Any:
        return self.session.client(self.service_name, region_name=self.region, config=DEFAULT_BOTO_CONFIG)

    @abstractmethod
    def page_spec(self) -> PageSpec:
        """List operation and page shape for this kind."""

    def include(self, record: dict) -> bool:
        """Whether a listed record is offered for deletion."""
        return True

    def collect(self) -> list[dict]:
        """Collect all resources of this kind, newest first.

        Returns:
            List of raw resource records as returned by AWS
        """
        client = self._create_client()
        records = drain_pages(client, self.page_spec(), key=self.kind.resource_id)

        records = [record for record in records if self.include(record)]
        records.sort(key=self.kind.timestamp, reverse=True)

        self.logger.debug(f"Collected {len(records)} {self.kind.label} in {self.region}")
        return records
