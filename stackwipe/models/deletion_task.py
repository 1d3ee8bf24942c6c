"""Deletion task model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional

from .deletion_record import DeletionRecord
from .resource_kind import ResourceKind

if TYPE_CHECKING:
    from ..restore.progress import ProgressSink


@dataclass
class DeletionTask:
    """One kind's worth of selected resources and the procedure deleting them.

    Tasks are built per session from the operator's selection and discarded
    after they run.

    Attributes:
        kind: Resource kind this task deletes
        title: Human-readable title, e.g. "Delete 3 IAM roles"
        resources: Selected records, in catalog order
        procedure: Callable running the deletions against a progress sink
    """

    kind: ResourceKind
    title: str
    resources: list[dict] = field(default_factory=list)
    procedure: Optional[Callable[["ProgressSink"], list[DeletionRecord]]] = None

    def run(self, progress: "ProgressSink") -> list[DeletionRecord]:
        """Run the task's deletions, reporting to the progress sink."""
        if self.procedure is None:
            raise ValueError(f"Task '{self.title}' has no procedure")
        return self.procedure(progress)
