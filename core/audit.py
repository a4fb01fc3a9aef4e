"""Simple audit log utilities."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List, Optional


@dataclass
class AuditEntry:
    user: str
    action: str
    entity: str
    entity_id: str
    old_value: Any
    new_value: Any
    timestamp: datetime


class AuditLog:
    """In-memory audit log of scenario changes."""

    def __init__(self) -> None:
        self.entries: List[AuditEntry] = []

    def record(
        self,
        user: str,
        action: str,
        entity: str,
        entity_id: str,
        old_value: Any = None,
        new_value: Any = None,
    ) -> AuditEntry:
        """Record a CREATE/UPDATE/DELETE/MOVE of ``entity`` with a UTC timestamp."""
        entry = AuditEntry(
            user=user,
            action=action,
            entity=entity,
            entity_id=entity_id,
            old_value=old_value,
            new_value=new_value,
            timestamp=datetime.now(timezone.utc),
        )
        self.entries.append(entry)
        return entry

    def for_entity(self, entity: str, entity_id: Optional[str] = None) -> List[AuditEntry]:
        return [
            e
            for e in self.entries
            if e.entity == entity and (entity_id is None or e.entity_id == entity_id)
        ]

    def as_dict(self) -> List[dict]:
        """Return log entries as dictionaries for persistence or inspection."""
        return [
            {
                "user": e.user,
                "action": e.action,
                "entity": e.entity,
                "entity_id": e.entity_id,
                "old": e.old_value,
                "new": e.new_value,
                "timestamp": e.timestamp.isoformat(),
            }
            for e in self.entries
        ]
