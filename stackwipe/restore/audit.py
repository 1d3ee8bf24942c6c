"""Audit storage for wipe sessions.

Stores and retrieves audit logs in YAML format, so there is a record of what a
wipe deleted after the resources themselves are gone.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import yaml

from ..models.deletion_operation import DeletionOperation
from ..models.deletion_record import DeletionRecord

AUDIT_FORMAT_VERSION = "1.0"


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _record_entry(record: DeletionRecord) -> dict[str, Any]:
    return {
        "kind": record.kind.value,
        "resource_id": record.resource_id,
        "name": record.name,
        "status": record.status.value,
        "timestamp": record.timestamp.isoformat(),
        "error_code": record.error_code,
        "error_message": record.error_message,
    }


def _operation_entry(operation: DeletionOperation) -> dict[str, Any]:
    return {
        "operation_id": operation.operation_id,
        "timestamp": operation.timestamp.isoformat(),
        "account_id": operation.account_id,
        "aws_profile": operation.aws_profile,
        "region": operation.region,
        "status": operation.status.value,
        "deleted_count": operation.deleted_count,
        "disabled_count": operation.disabled_count,
        "failed_count": operation.failed_count,
        "skipped_count": operation.skipped_count,
        "completed_at": _isoformat(operation.completed_at),
        "duration_seconds": operation.duration_seconds,
    }


class AuditStorage:
    """Audit log storage and retrieval.

    One YAML file per wipe session, grouped by the month it started in:
        ~/.stackwipe/audit-logs/2026/10/operation-op_123.yaml

    Attributes:
        storage_dir: Base directory for audit logs
    """

    def __init__(self, storage_dir: Optional[str] = None) -> None:
        if storage_dir is None:
            storage_dir = str(Path.home() / ".stackwipe" / "audit-logs")

        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def _audit_files(self, operation_id: str = "*") -> list[Path]:
        return sorted(self.storage_dir.glob(f"*/*/operation-{operation_id}.yaml"))

    def log_operation(self, operation: DeletionOperation) -> Path:
        """Write the operation, its task outcomes and its deletion records.

        A log with the same operation ID is overwritten.

        Returns:
            Path of the written audit file
        """
        month_dir = self.storage_dir / str(operation.timestamp.year) / f"{operation.timestamp.month:02d}"
        month_dir.mkdir(parents=True, exist_ok=True)

        audit_data = {
            "metadata": {
                "version": AUDIT_FORMAT_VERSION,
                "log_type": "resource_wipe",
                "created_at": datetime.now(timezone.utc).isoformat(),
            },
            "operation": _operation_entry(operation),
            "tasks": [
                {
                    "title": task.title,
                    "kind": task.kind,
                    "succeeded": task.succeeded,
                    "error_message": task.error_message,
                }
                for task in operation.tasks
            ],
            "records": [_record_entry(record) for record in operation.records],
        }

        path = month_dir / f"operation-{operation.operation_id}.yaml"
        with open(path, "w") as f:
            yaml.safe_dump(audit_data, f, default_flow_style=False, sort_keys=False)
        return path

    def get_operation(self, operation_id: str) -> Optional[dict]:
        """Load one audit log, or None if no session has that ID."""
        for path in self._audit_files(operation_id):
            with open(path) as f:
                return yaml.safe_load(f)
        return None

    def query_operations(self, since: Optional[datetime] = None, until: Optional[datetime] = None) -> list[dict]:
        """Load audit logs whose session started within [since, until].

        Naive datetimes are taken as UTC. Either bound may be None.

        Returns:
            Matching audit logs, oldest first
        """
        matches = []

        for path in self._audit_files():
            with open(path) as f:
                data = yaml.safe_load(f)

            started = _as_utc(datetime.fromisoformat(data["operation"]["timestamp"]))
            if since and started < _as_utc(since):
                continue
            if until and started > _as_utc(until):
                continue
            matches.append(data)

        matches.sort(key=lambda data: _as_utc(datetime.fromisoformat(data["operation"]["timestamp"])))
        return matches
