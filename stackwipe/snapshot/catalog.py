"""Resource catalog.

Builds the map from resource kind to every discovered resource of that kind.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import boto3

from ..models.resource_kind import ResourceKind
from .resource_collectors import COLLECTORS
from .resource_collectors.base import BaseResourceCollector
from .resource_collectors.iam_collector import IamRoleCollector
from .resource_collectors.logs_collector import DEFAULT_LOG_GROUP_PREFIX, LogGroupCollector

logger = logging.getLogger(__name__)

Catalog = dict[ResourceKind, list[dict]]


def create_collector(
    kind: ResourceKind,
    session: boto3.Session,
    region: str,
    log_group_prefix: Optional[str] = DEFAULT_LOG_GROUP_PREFIX,
    protected_role_prefixes: Optional[Iterable[str]] = None,
) -> BaseResourceCollector:
    """Instantiate the collector for a kind."""
    collector_class = COLLECTORS[kind]
    if collector_class is LogGroupCollector:
        return LogGroupCollector(session, region, prefix=log_group_prefix)
    if collector_class is IamRoleCollector:
        return IamRoleCollector(session, region, extra_reserved_prefixes=protected_role_prefixes)
    return collector_class(session, region)


def build_catalog(
    session: boto3.Session,
    region: str,
    kinds: Optional[Iterable[ResourceKind]] = None,
    log_group_prefix: Optional[str] = DEFAULT_LOG_GROUP_PREFIX,
    protected_role_prefixes: Optional[Iterable[str]] = None,
) -> Catalog:
    """Collect every requested kind into a catalog.

    Kinds are collected in enum order regardless of the order requested. A
    listing failure propagates and aborts catalog population.

    Args:
        session: boto3 session for the configured identity
        region: AWS region for regional services
        kinds: Kinds to collect (default: all)
        log_group_prefix: Name prefix for log groups
        protected_role_prefixes: Extra IAM role prefixes to hide

    Returns:
        Mapping of kind to records sorted newest first
    """
    wanted = set(kinds) if kinds is not None else set(ResourceKind)
    catalog: Catalog = {}

    for kind in ResourceKind:
        if kind not in wanted:
            continue
        collector = create_collector(
            kind,
            session,
            region,
            log_group_prefix=log_group_prefix,
            protected_role_prefixes=protected_role_prefixes,
        )
        logger.info(f"Listing {kind.label}...")
        catalog[kind] = collector.collect()

    logger.debug(f"Catalog: {', '.join(f'{k.value}={len(v)}' for k, v in catalog.items())}")
    return catalog
