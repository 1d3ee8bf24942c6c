"""Deletion operation model.

Summary of one interactive wipe session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from .deletion_record import DeletionRecord, DeletionStatus


class OperationStatus(Enum):
    """Operation execution status."""

    EXECUTING = "executing"
    COMPLETED = "completed"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass
class TaskOutcome:
    """Result of a single deletion task.

    Attributes:
        title: Task title
        kind: Resource kind value
        succeeded: True if the task ran to completion
        error_message: Provider message if the task failed (optional)
    """

    title: str
    kind: str
    succeeded: bool
    error_message: Optional[str] = None


@dataclass
class DeletionOperation:
    """Deletion operation entity.

    State transitions:
        executing → completed (all tasks succeeded)
        executing → partial (some tasks failed)
        executing → failed (every task failed)

    Attributes:
        operation_id: Unique identifier for the operation
        timestamp: When the operation started (UTC)
        region: AWS region the session ran against
        status: Current execution status
        account_id: AWS account ID (optional)
        aws_profile: AWS profile used for credentials (optional)
        tasks: Per-task outcomes
        records: Per-resource deletion records
        completed_at: When execution completed (optional)
        duration_seconds: Total execution duration (optional)
    """

    operation_id: str
    timestamp: datetime
    region: str
    status: OperationStatus
    account_id: Optional[str] = None
    aws_profile: Optional[str] = None
    tasks: list[TaskOutcome] = field(default_factory=list)
    records: list[DeletionRecord] = field(default_factory=list)
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None

    def count(self, status: DeletionStatus) -> int:
        """Number of records with the given status."""
        return sum(1 for record in self.records if record.status == status)

    @property
    def deleted_count(self) -> int:
        return self.count(DeletionStatus.DELETED)

    @property
    def disabled_count(self) -> int:
        return self.count(DeletionStatus.DISABLED)

    @property
    def failed_count(self) -> int:
        return self.count(DeletionStatus.FAILED)

    @property
    def skipped_count(self) -> int:
        return self.count(DeletionStatus.SKIPPED)

    @property
    def failed_tasks(self) -> list[TaskOutcome]:
        return [task for task in self.tasks if not task.succeeded]

    def validate(self) -> bool:
        """Validate operation invariants.

        Validation rules:
            - completed_at must not be before timestamp
            - completed status requires no failed task
            - failed status requires every task to have failed

        Returns:
            True if validation passes

        Raises:
            ValueError: If any validation rule fails
        """
        if self.completed_at and self.completed_at < self.timestamp:
            raise ValueError("Completion time before start time")

        if self.status == OperationStatus.COMPLETED and self.failed_tasks:
            raise ValueError("Completed operation cannot have failed tasks")

        if self.status == OperationStatus.FAILED and len(self.failed_tasks) != len(self.tasks):
            raise ValueError("Failed operation requires every task to have failed")

        return True
