"""Saved scenario storage.

Scenarios are kept in a single JSON file as a list of records keyed by
``(scope, name)``.  The default scope is ``anonymous``; scenarios that belong
to a client live under ``client:<id>``.  Deletes are soft: the record stays
in the file with ``deleted`` set so it can be audited or restored by hand.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from core.audit import AuditLog
from loancomp import codec
from loancomp.models import LoanData
from loancomp.presets import SCENARIO_PAYLOAD_VERSION

logger = logging.getLogger(__name__)

SCENARIO_FILE = os.environ.get("LOANCOMP_SCENARIO_FILE", "scenarios.json")
DEFAULT_SCOPE = "anonymous"


class ScenarioNotFoundError(LookupError):
    pass


def client_scope(client_id) -> str:
    return f"client:{client_id}"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ScenarioRecord:
    scope: str
    name: str
    payload: Dict[str, Any]
    createdAt: str
    updatedAt: str
    deleted: bool = False


class ScenarioStore:
    """JSON file backed store of named loan scenarios."""

    def __init__(
        self,
        path: Optional[str] = None,
        audit: Optional[AuditLog] = None,
        user: str = DEFAULT_SCOPE,
    ) -> None:
        self.path = path or SCENARIO_FILE
        self.audit = audit if audit is not None else AuditLog()
        self.user = user
        self.records: Dict[Tuple[str, str], ScenarioRecord] = {}
        self._load()

    # -- file handling ----------------------------------------------------

    def _load(self) -> None:
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not read scenario file %s: %s", self.path, exc)
            return
        if not isinstance(data, list):
            logger.warning("Ignoring scenario file %s: expected a list", self.path)
            return
        for item in data:
            try:
                record = ScenarioRecord(**item)
            except TypeError:
                logger.warning("Skipping malformed scenario record in %s", self.path)
                continue
            self.records[(record.scope, record.name)] = record

    def _save(self) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump([asdict(r) for r in self.records.values()], f, indent=2)

    def _live(self, name: str, scope: str) -> Optional[ScenarioRecord]:
        record = self.records.get((scope, name))
        if record is None or record.deleted:
            return None
        return record

    # -- operations -------------------------------------------------------

    def list(self, scope: str = DEFAULT_SCOPE) -> List[ScenarioRecord]:
        """Live scenarios in ``scope``, most recently updated first."""
        live = [r for r in self.records.values() if r.scope == scope and not r.deleted]
        return sorted(live, key=lambda r: r.updatedAt, reverse=True)

    def save(
        self,
        name: str,
        loan_data: LoanData,
        preferred_program_id: Optional[int] = None,
        scope: str = DEFAULT_SCOPE,
    ) -> ScenarioRecord:
        name = (name or "").strip()
        if not name:
            raise ValueError("Scenario name is required")
        payload = codec.encode(loan_data, preferred_program_id, name)
        now = _now()
        existing = self._live(name, scope)
        if existing is None:
            record = ScenarioRecord(scope, name, payload, createdAt=now, updatedAt=now)
            action, old = "CREATE", None
        else:
            record = ScenarioRecord(
                scope, name, payload, createdAt=existing.createdAt, updatedAt=now
            )
            action, old = "UPDATE", existing.payload
        self.records[(scope, name)] = record
        self._save()
        self.audit.record(self.user, action, "scenario", f"{scope}/{name}", old, payload)
        logger.info("Saved scenario %r in %s", name, scope)
        return record

    def load(self, name: str, scope: str = DEFAULT_SCOPE) -> Optional[codec.DecodeResult]:
        """Decode a stored scenario; ``None`` when there is no such scenario."""
        record = self._live(name, scope)
        if record is None:
            return None
        return codec.decode(record.payload)

    def delete(self, name: str, scope: str = DEFAULT_SCOPE) -> None:
        record = self._live(name, scope)
        if record is None:
            raise ScenarioNotFoundError(f"Scenario {name!r} not found in {scope}")
        record.deleted = True
        record.updatedAt = _now()
        self._save()
        self.audit.record(self.user, "DELETE", "scenario", f"{scope}/{name}", record.payload, None)
        logger.info("Deleted scenario %r in %s", name, scope)

    def move_scope(
        self, name: str, from_scope: str, to_scope: str, overwrite: bool = False
    ) -> ScenarioRecord:
        """Move a scenario to another scope, e.g. when a client is created."""
        record = self._live(name, from_scope)
        if record is None:
            raise ScenarioNotFoundError(f"Scenario {name!r} not found in {from_scope}")
        if self._live(name, to_scope) is not None and not overwrite:
            raise ValueError(f"Scenario {name!r} already exists in {to_scope}")
        moved = ScenarioRecord(
            to_scope, name, record.payload, createdAt=record.createdAt, updatedAt=_now()
        )
        del self.records[(from_scope, name)]
        self.records[(to_scope, name)] = moved
        self._save()
        self.audit.record(self.user, "MOVE", "scenario", name, from_scope, to_scope)
        logger.info("Moved scenario %r from %s to %s", name, from_scope, to_scope)
        return moved

    def export_scenarios(self, scope: str = DEFAULT_SCOPE) -> Dict[str, Any]:
        return {
            "version": SCENARIO_PAYLOAD_VERSION,
            "scope": scope,
            "exportedAt": _now(),
            "scenarios": [
                {
                    "name": r.name,
                    "createdAt": r.createdAt,
                    "updatedAt": r.updatedAt,
                    "payload": r.payload,
                }
                for r in self.list(scope)
            ],
        }

    def import_scenarios(
        self, data: Any, scope: str = DEFAULT_SCOPE, overwrite: bool = False
    ) -> Tuple[int, List[str]]:
        """Import an ``export_scenarios`` document (or a bare list of its items).

        Returns the number of scenarios imported and one message per item
        that was skipped.
        """
        items = data.get("scenarios") if isinstance(data, dict) else data
        if not isinstance(items, list):
            return 0, ["Import data must contain a list of scenarios"]

        imported = 0
        errors: List[str] = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                errors.append(f"Item {index + 1}: not an object")
                continue
            name = str(item.get("name") or "").strip()
            if not name:
                errors.append(f"Item {index + 1}: missing name")
                continue
            result = codec.decode(item.get("payload"))
            if not result.ok:
                errors.append(f"{name}: {result.error.message}")
                continue
            if self._live(name, scope) is not None and not overwrite:
                errors.append(f"{name}: already exists")
                continue
            self.save(
                name,
                result.value.loan_data,
                result.value.preferred_program_id,
                scope,
            )
            imported += 1
        return imported, errors
