"""Deletion record model.

Outcome of deleting a single selected resource.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .resource_kind import ResourceKind


class DeletionStatus(Enum):
    """Individual resource deletion status."""

    DELETED = "deleted"
    DISABLED = "disabled"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class DeletionRecord:
    """Deletion record entity.

    Validation rules:
        - status=failed: requires error_message
        - status=deleted/disabled: no error_code or error_message
        - status=disabled: only CloudFront distributions are disabled first

    Attributes:
        kind: Resource kind
        resource_id: Identifier passed to the deletion call
        name: Name shown to the operator
        status: Deletion outcome
        timestamp: When the deletion was attempted (UTC)
        error_code: AWS error code if failed (optional)
        error_message: Provider error message if failed (optional)
    """

    kind: ResourceKind
    resource_id: str
    name: str
    status: DeletionStatus
    timestamp: datetime
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def validate(self) -> bool:
        """Validate record invariants.

        Returns:
            True if validation passes

        Raises:
            ValueError: If any validation rule fails
        """
        if self.status == DeletionStatus.FAILED:
            if not self.error_message:
                raise ValueError("Failed status requires error_message")
        elif self.status in (DeletionStatus.DELETED, DeletionStatus.DISABLED):
            if self.error_code or self.error_message:
                raise ValueError(f"{self.status.value} status cannot have an error")

        if self.status == DeletionStatus.DISABLED and self.kind != ResourceKind.CLOUDFRONT_DISTRIBUTION:
            raise ValueError("Only CloudFront distributions can be left disabled")

        return True
