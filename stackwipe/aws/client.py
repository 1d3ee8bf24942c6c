"""boto3 session and client factories."""

from __future__ import annotations

import logging
from typing import Any, Optional

import boto3
from botocore.config import Config as BotoConfig

logger = logging.getLogger(__name__)

# botocore retries transient and throttling errors itself in "standard" mode.
DEFAULT_BOTO_CONFIG = BotoConfig(retries={"max_attempts": 3, "mode": "standard"})

# One HTTP request per call, for clients whose calls are retried by
# restore.retry instead.
SINGLE_ATTEMPT_BOTO_CONFIG = BotoConfig(retries={"total_max_attempts": 1, "mode": "standard"})


def create_session(profile_name: Optional[str] = None, region_name: Optional[str] = None) -> boto3.Session:
    """Create a boto3 session for the given profile and region."""
    if profile_name:
        logger.debug(f"Creating boto3 session with profile {profile_name}")
        return boto3.Session(profile_name=profile_name, region_name=region_name)
    return boto3.Session(region_name=region_name)


def create_boto_client(
    service_name: str,
    region_name: Optional[str] = None,
    profile_name: Optional[str] = None,
    config: Optional[BotoConfig] = None,
) -> Any:
    """Create a boto3 client.

    Args:
        service_name: AWS service name (e.g. "s3", "iam")
        region_name: AWS region
        profile_name: AWS profile name (optional)
        config: botocore client config (default: DEFAULT_BOTO_CONFIG)

    Returns:
        boto3 client for the service
    """
    session = create_session(profile_name=profile_name, region_name=region_name)
    return session.client(service_name, region_name=region_name, config=config or DEFAULT_BOTO_CONFIG)
