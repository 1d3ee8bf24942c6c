"""Resource cleaner for wipe sessions.

Runs the generated deletion tasks and summarizes the session.
"""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from ..models.deletion_operation import DeletionOperation, OperationStatus, TaskOutcome
from ..models.deletion_record import DeletionRecord
from ..models.deletion_task import DeletionTask
from .audit import AuditStorage
from .progress import LoggingProgress, ProgressSink
from .tasks import DeletionTaskError

logger = logging.getLogger(__name__)

ProgressFactory = Callable[[DeletionTask], ProgressSink]


def _logging_progress(task: DeletionTask) -> ProgressSink:
    return LoggingProgress(task.title)


class ResourceCleaner:
    """Resource cleaner orchestrator.

    Runs one task at a time, one resource at a time within a task. A failed
    task ends with an error signal on its progress sink and does not stop the
    tasks after it.

    Attributes:
        audit_storage: Audit storage for session logs (optional)
    """

    def __init__(self, audit_storage: Optional[AuditStorage] = None) -> None:
        self.audit_storage = audit_storage

    def execute(
        self,
        tasks: Sequence[DeletionTask],
        progress_factory: Optional[ProgressFactory] = None,
        region: str = "",
        account_id: Optional[str] = None,
        aws_profile: Optional[str] = None,
    ) -> DeletionOperation:
        """Run deletion tasks in order.

        Args:
            tasks: Tasks from generate_tasks
            progress_factory: Creates the progress sink for each task
            region: AWS region, recorded on the operation
            account_id: AWS account ID, recorded on the operation
            aws_profile: AWS profile, recorded on the operation

        Returns:
            DeletionOperation with per-task outcomes and per-resource records
        """
        factory = progress_factory or _logging_progress
        started = time.monotonic()

        operation = DeletionOperation(
            operation_id=f"op_{uuid.uuid4()}",
            timestamp=datetime.now(timezone.utc),
            region=region,
            status=OperationStatus.EXECUTING,
            account_id=account_id,
            aws_profile=aws_profile,
        )

        for task in tasks:
            outcome, records = self._run_task(task, factory(task))
            operation.tasks.append(outcome)
            operation.records.extend(records)

        failed = len(operation.failed_tasks)
        if failed == 0:
            operation.status = OperationStatus.COMPLETED
        elif failed == len(operation.tasks):
            operation.status = OperationStatus.FAILED
        else:
            operation.status = OperationStatus.PARTIAL

        operation.completed_at = datetime.now(timezone.utc)
        operation.duration_seconds = round(time.monotonic() - started, 3)

        logger.info(
            f"Operation {operation.operation_id} {operation.status.value}: "
            f"{operation.deleted_count} deleted, {operation.disabled_count} disabled, "
            f"{operation.failed_count} failed, {operation.skipped_count} skipped"
        )

        if self.audit_storage is not None:
            self.audit_storage.log_operation(operation)

        return operation

    def _run_task(self, task: DeletionTask, progress: ProgressSink) -> tuple[TaskOutcome, list[DeletionRecord]]:
        try:
            records = task.run(progress)
        except DeletionTaskError as e:
            progress.error(e.message)
            return TaskOutcome(task.title, task.kind.value, False, e.message), e.records
        except Exception as e:
            logger.exception(f"Unexpected error in task '{task.title}'")
            progress.error(str(e))
            return TaskOutcome(task.title, task.kind.value, False, str(e)), []

        progress.complete()
        return TaskOutcome(task.title, task.kind.value, True), records
