import itertools
import json

import pytest

from core import storage
from core.storage import ScenarioNotFoundError, ScenarioStore, client_scope
from loancomp.models import LoanData, Program


@pytest.fixture
def clock(monkeypatch):
    ticks = (f"2026-01-01T00:00:{i:02d}+00:00" for i in itertools.count())
    monkeypatch.setattr(storage, "_now", lambda: next(ticks))


@pytest.fixture
def store(tmp_path, clock):
    return ScenarioStore(str(tmp_path / "scenarios.json"), user="lo@example.com")


def _loan(rate=6.5):
    return LoanData(purchasePrice=400000, downPayment=80000,
                    programs=[Program(id=1, rate=rate, effectiveRate=rate)])


def test_save_load_and_list(store):
    store.save("First", _loan(), 1)
    store.save("Second", _loan(7.0))
    assert [r.name for r in store.list()] == ["Second", "First"]
    result = store.load("First")
    assert result.ok
    assert result.value.loan_data == _loan()
    assert result.value.preferred_program_id == 1
    assert store.load("Missing") is None


def test_save_is_upsert_and_keeps_created_at(store):
    first = store.save("Smith", _loan())
    second = store.save("Smith", _loan(6.0))
    assert second.createdAt == first.createdAt
    assert second.updatedAt > first.updatedAt
    assert len(store.list()) == 1
    assert store.load("Smith").value.loan_data.programs[0].rate == 6.0
    assert [e.action for e in store.audit.entries] == ["CREATE", "UPDATE"]


def test_empty_name_rejected(store):
    with pytest.raises(ValueError):
        store.save("   ", _loan())


def test_soft_delete(store, tmp_path):
    store.save("Old", _loan())
    store.delete("Old")
    assert store.list() == []
    assert store.load("Old") is None
    data = json.loads((tmp_path / "scenarios.json").read_text())
    assert data[0]["deleted"] is True
    with pytest.raises(ScenarioNotFoundError):
        store.delete("Old")


def test_persists_across_instances(store, tmp_path):
    store.save("Keep", _loan())
    again = ScenarioStore(str(tmp_path / "scenarios.json"))
    assert [r.name for r in again.list()] == ["Keep"]


def test_scopes_are_separate(store):
    store.save("Plan", _loan(), scope=client_scope(42))
    assert store.list() == []
    assert [r.name for r in store.list("client:42")] == ["Plan"]


def test_move_scope(store):
    store.save("Draft", _loan())
    store.move_scope("Draft", "anonymous", client_scope(7))
    assert store.list() == []
    assert store.load("Draft", "client:7").ok
    store.save("Draft", _loan(6.0))
    with pytest.raises(ValueError):
        store.move_scope("Draft", "anonymous", "client:7")
    store.move_scope("Draft", "anonymous", "client:7", overwrite=True)
    assert store.load("Draft", "client:7").value.loan_data.programs[0].rate == 6.0
    with pytest.raises(ScenarioNotFoundError):
        store.move_scope("Nope", "anonymous", "client:7")
    assert store.audit.entries[-1].action == "MOVE"


def test_export_and_import(store, tmp_path, clock):
    store.save("A", _loan())
    store.save("B", _loan(7.0))
    exported = store.export_scenarios()
    assert [s["name"] for s in exported["scenarios"]] == ["B", "A"]

    other = ScenarioStore(str(tmp_path / "other.json"))
    other.save("A", _loan(5.0))
    exported["scenarios"].append({"name": "Broken", "payload": {"loanData": {}}})
    exported["scenarios"].append({"payload": {}})
    count, errors = other.import_scenarios(exported)
    assert count == 1
    assert len(errors) == 3
    assert other.load("A").value.loan_data.programs[0].rate == 5.0

    count, errors = other.import_scenarios(exported["scenarios"][:2], overwrite=True)
    assert (count, errors) == (2, [])
    assert other.load("A").value.loan_data.programs[0].rate == 6.5


def test_import_rejects_non_list(store):
    assert store.import_scenarios({"scenarios": "x"}) == (0, ["Import data must contain a list of scenarios"])


def test_corrupt_file_loads_empty(tmp_path):
    path = tmp_path / "scenarios.json"
    path.write_text("{not json")
    assert ScenarioStore(str(path)).list() == []
