"""Versioned JSON envelope for saved scenarios.

Encoded payloads look like::

    {"version": 1, "name": "Smith refi", "loanData": {...}, "preferredProgramId": 17}

``decode`` accepts both the current ``loanData`` shape and the legacy shape
that stored ``propertyTaxes``/``hoi``/``refinanceAmount``.  It reports problems
through a ``DecodeResult`` rather than raising.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import ValidationError

from loancomp.models import Debt, LoanData, Program, ProgramDebtSelection
from loancomp.presets import SCENARIO_PAYLOAD_VERSION

logger = logging.getLogger(__name__)

# current name -> legacy name
LEGACY_FIELDS = {
    "annualPropertyTax": "propertyTaxes",
    "annualHomeInsurance": "hoi",
    "refinanceLoanAmount": "refinanceAmount",
}


class DecodeErrorKind(str, Enum):
    INVALID_FORMAT = "InvalidFormat"
    MISSING_FIELD = "MissingField"
    INVALID_PROGRAM = "InvalidProgram"


@dataclass(frozen=True)
class DecodeError:
    kind: DecodeErrorKind
    message: str
    field: Optional[str] = None
    index: Optional[int] = None


@dataclass(frozen=True)
class DecodedScenario:
    loan_data: LoanData
    preferred_program_id: Optional[int] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class DecodeResult:
    value: Optional[DecodedScenario] = None
    error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: DecodedScenario) -> "DecodeResult":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: DecodeErrorKind, message: str, **detail) -> "DecodeResult":
        logger.info("Scenario decode failed: %s (%s)", message, kind.value)
        return cls(error=DecodeError(kind=kind, message=message, **detail))


def encode(
    loan: LoanData, preferred_program_id: Optional[int] = None, name: Optional[str] = None
) -> Dict[str, Any]:
    """Build a payload that shares no objects with ``loan``."""

    return {
        "version": SCENARIO_PAYLOAD_VERSION,
        "name": name,
        "loanData": loan.model_dump(mode="json"),
        "preferredProgramId": preferred_program_id,
    }


def payload_shape(raw_loan: Dict[str, Any]) -> str:
    """Classify a ``loanData`` object as ``"legacy"`` or ``"current"``.

    A payload is legacy when it carries a legacy field whose current
    counterpart is missing.
    """

    for current, legacy in LEGACY_FIELDS.items():
        if raw_loan.get(current) is None and raw_loan.get(legacy) is not None:
            return "legacy"
    return "current"


def _upgrade_legacy(raw_loan: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(raw_loan)
    for current, legacy in LEGACY_FIELDS.items():
        if out.get(current) is None and out.get(legacy) is not None:
            out[current] = out[legacy]
    for legacy in LEGACY_FIELDS.values():
        out.pop(legacy, None)
    return out


def _drop_nulls(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in raw.items() if v is not None}


def _error_field(exc: ValidationError) -> Optional[str]:
    loc = exc.errors()[0].get("loc", ())
    return str(loc[0]) if loc else None


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {err.get('msg', 'invalid value')}" if loc else err.get("msg", "")


def _decode_program(index: int, raw: Any):
    if not isinstance(raw, dict):
        return None, DecodeResult.failure(
            DecodeErrorKind.INVALID_PROGRAM,
            f"Program {index + 1} is not an object",
            index=index,
        )
    if raw.get("id") is None:
        return None, DecodeResult.failure(
            DecodeErrorKind.INVALID_PROGRAM,
            f"Program {index + 1} is missing an id",
            field="id",
            index=index,
        )
    data = _drop_nulls(raw)
    data.setdefault("effectiveRate", data.get("rate", 0.0))
    try:
        return Program.model_validate(data), None
    except ValidationError as exc:
        return None, DecodeResult.failure(
            DecodeErrorKind.INVALID_PROGRAM,
            f"Program {index + 1} is invalid: {_first_error(exc)}",
            field=_error_field(exc),
            index=index,
        )


def decode(raw: Any) -> DecodeResult:
    if not isinstance(raw, dict):
        return DecodeResult.failure(
            DecodeErrorKind.INVALID_FORMAT, "Scenario payload must be an object"
        )
    # The backend store wrote string versions ("1.0").
    version = raw.get("version")
    if version is None:
        version = SCENARIO_PAYLOAD_VERSION
    try:
        supported = float(version) <= SCENARIO_PAYLOAD_VERSION
    except (TypeError, ValueError):
        supported = False
    if not supported:
        return DecodeResult.failure(
            DecodeErrorKind.INVALID_FORMAT,
            f"Unsupported scenario version: {version!r}",
            field="version",
        )
    raw_loan = raw.get("loanData")
    if not isinstance(raw_loan, dict):
        return DecodeResult.failure(
            DecodeErrorKind.INVALID_FORMAT,
            "Missing or invalid loanData",
            field="loanData",
        )
    if raw_loan.get("loanType") is None:
        return DecodeResult.failure(
            DecodeErrorKind.MISSING_FIELD,
            "Missing required field: loanType",
            field="loanType",
        )

    if payload_shape(raw_loan) == "legacy":
        raw_loan = _upgrade_legacy(raw_loan)
    else:
        raw_loan = {k: v for k, v in raw_loan.items() if k not in LEGACY_FIELDS.values()}
    data = _drop_nulls(raw_loan)

    for key in ("programs", "debts", "programDebtSelections"):
        if key in data and not isinstance(data[key], list):
            return DecodeResult.failure(
                DecodeErrorKind.INVALID_FORMAT, f"{key} must be a list", field=key
            )

    programs = []
    for index, raw_program in enumerate(data.pop("programs", [])):
        program, failed = _decode_program(index, raw_program)
        if failed is not None:
            return failed
        programs.append(program)

    debts = []
    for index, raw_debt in enumerate(data.pop("debts", [])):
        if not isinstance(raw_debt, dict):
            return DecodeResult.failure(
                DecodeErrorKind.INVALID_FORMAT,
                f"Debt {index + 1} is not an object",
                field="debts",
                index=index,
            )
        debt_data = _drop_nulls(raw_debt)
        debt_data.setdefault("id", index + 1)
        try:
            debts.append(Debt.model_validate(debt_data))
        except ValidationError as exc:
            return DecodeResult.failure(
                DecodeErrorKind.INVALID_FORMAT,
                f"Debt {index + 1} is invalid: {_first_error(exc)}",
                field="debts",
                index=index,
            )

    try:
        selections = [
            ProgramDebtSelection.model_validate(s)
            for s in data.pop("programDebtSelections", [])
        ]
        loan = LoanData.model_validate(
            {**data, "programs": programs, "debts": debts, "programDebtSelections": selections}
        )
    except ValidationError as exc:
        return DecodeResult.failure(
            DecodeErrorKind.INVALID_FORMAT,
            f"Invalid loanData: {_first_error(exc)}",
            field=_error_field(exc),
        )

    preferred = raw.get("preferredProgramId")
    if preferred is not None:
        try:
            preferred = int(preferred)
        except (TypeError, ValueError):
            return DecodeResult.failure(
                DecodeErrorKind.INVALID_FORMAT,
                "preferredProgramId must be an integer",
                field="preferredProgramId",
            )
    name = raw.get("name")
    return DecodeResult.success(
        DecodedScenario(
            loan_data=loan,
            preferred_program_id=preferred,
            name=str(name) if name is not None else None,
        )
    )


def decode_json(text: str) -> DecodeResult:
    try:
        raw = json.loads(text)
    except (TypeError, ValueError):
        return DecodeResult.failure(DecodeErrorKind.INVALID_FORMAT, "Invalid JSON format")
    return decode(raw)
