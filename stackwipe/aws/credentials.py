"""Credential validation via STS."""

from __future__ import annotations

import logging
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError, ProfileNotFound

from .client import create_boto_client

logger = logging.getLogger(__name__)


class CredentialValidationError(Exception):
    """Raised when the configured identity cannot be resolved."""


def validate_credentials(profile_name: Optional[str] = None, region_name: Optional[str] = None) -> dict:
    """Resolve the calling identity.

    Args:
        profile_name: AWS profile name (optional)
        region_name: AWS region (optional)

    Returns:
        Dictionary with account_id, arn and user_id

    Raises:
        CredentialValidationError: If no usable credentials are configured
    """
    try:
        sts = create_boto_client("sts", region_name=region_name, profile_name=profile_name)
        identity = sts.get_caller_identity()
    except ProfileNotFound as e:
        raise CredentialValidationError(f"AWS profile not found: {e}") from e
    except NoCredentialsError as e:
        raise CredentialValidationError("No AWS credentials configured") from e
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "Unknown")
        raise CredentialValidationError(f"Credential check failed ({error_code}): {e}") from e
    except BotoCoreError as e:
        raise CredentialValidationError(f"Credential check failed: {e}") from e

    logger.debug(f"Resolved caller identity {identity.get('Arn')}")
    return {
        "account_id": identity["Account"],
        "arn": identity["Arn"],
        "user_id": identity.get("UserId"),
    }
