"""Resource wipe module.

Turns the operator's selection into per-kind deletion tasks and runs them.

Classes:
    ResourceDeleter: Per-kind deletion protocols
    ResourceCleaner: Runs deletion tasks one after another
    AuditStorage: Audit log storage and retrieval
"""

from __future__ import annotations

__all__ = [
    "ResourceDeleter",
    "ResourceCleaner",
    "AuditStorage",
]
