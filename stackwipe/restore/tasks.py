"""Deletion task generation.

Turns the operator's selection (kind -> selected records) into one deletion
task per kind.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Sequence

from ..models.deletion_record import DeletionRecord, DeletionStatus
from ..models.deletion_task import DeletionTask
from ..models.resource_kind import ResourceKind
from .deleter import ResourceDeleter
from .progress import ProgressSink
from .retry import error_code, error_message

logger = logging.getLogger(__name__)


class DeletionTaskError(Exception):
    """A deletion task stopped at its first failed resource.

    Attributes:
        message: Provider error message, verbatim
        records: Records for every resource in the task, including skipped ones
    """

    def __init__(self, message: str, records: list[DeletionRecord]) -> None:
        super().__init__(message)
        self.message = message
        self.records = records


def task_title(kind: ResourceKind, count: int) -> str:
    return f"Delete {count} {kind.label}"


def _record(kind: ResourceKind, resource: dict, status: DeletionStatus, error: Optional[BaseException] = None) -> DeletionRecord:
    return DeletionRecord(
        kind=kind,
        resource_id=kind.resource_id(resource),
        name=kind.display_name(resource),
        status=status,
        timestamp=datetime.now(timezone.utc),
        error_code=error_code(error) if error is not None else None,
        error_message=error_message(error) if error is not None else None,
    )


def delete_resources(
    kind: ResourceKind,
    resources: Sequence[dict],
    deleter: ResourceDeleter,
    progress: ProgressSink,
) -> list[DeletionRecord]:
    """Delete resources one at a time, stopping at the first failure.

    Args:
        kind: Resource kind of every record
        resources: Records to delete, in order
        deleter: Protocol implementation
        progress: Sink for sub-step notifications

    Returns:
        One record per resource

    Raises:
        DeletionTaskError: If a deletion fails; remaining resources are skipped
    """
    records: list[DeletionRecord] = []

    for index, resource in enumerate(resources):
        try:
            status = deleter.delete(kind, resource, progress.next)
        except Exception as e:
            logger.error(f"Failed to delete {kind.value} {kind.resource_id(resource)}: {e}")
            records.append(_record(kind, resource, DeletionStatus.FAILED, e))
            records.extend(_record(kind, rest, DeletionStatus.SKIPPED) for rest in resources[index + 1:])
            raise DeletionTaskError(error_message(e), records) from e

        records.append(_record(kind, resource, status))

    return records


def _make_procedure(
    kind: ResourceKind,
    resources: list[dict],
    deleter: ResourceDeleter,
) -> Callable[[ProgressSink], list[DeletionRecord]]:
    def procedure(progress: ProgressSink) -> list[DeletionRecord]:
        return delete_resources(kind, resources, deleter, progress)

    return procedure


def generate_tasks(selection: Mapping[Any, Sequence[dict]], deleter: ResourceDeleter) -> list[DeletionTask]:
    """Build one deletion task per selected kind.

    Tasks follow the mapping's key order. Keys that name no known kind and
    kinds with an empty selection produce no task. Within a task, resources
    are deleted newest first, and only the records given are touched.

    Args:
        selection: Mapping of kind (or kind value) to selected records
        deleter: Protocol implementation the tasks call

    Returns:
        List of deletion tasks
    """
    tasks = []

    for key, selected in selection.items():
        kind = ResourceKind.from_value(key)
        if kind is None:
            logger.debug(f"Skipping unsupported resource type: {key}")
            continue

        resources = sorted(selected or [], key=kind.timestamp, reverse=True)
        if not resources:
            continue

        tasks.append(
            DeletionTask(
                kind=kind,
                title=task_title(kind, len(resources)),
                resources=resources,
                procedure=_make_procedure(kind, resources, deleter),
            )
        )

    return tasks
