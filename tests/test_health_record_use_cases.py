from __future__ import annotations

from datetime import timedelta

import pytest

from fakes import NOW, FakeHealthRecordsPort
from mediscan.application.dto.health_records import (
    AddHealthRecordInput,
    ListHealthRecordsInput,
    UpdateHealthRecordInput,
)
from mediscan.application.use_cases.add_health_record import AddHealthRecordUseCase
from mediscan.application.use_cases.delete_health_record import DeleteHealthRecordUseCase
from mediscan.application.use_cases.list_health_records import ListHealthRecordsUseCase
from mediscan.application.use_cases.update_health_record import UpdateHealthRecordUseCase
from mediscan.domain.exceptions import (
    BadRequestError,
    DisallowedFieldsError,
    HealthRecordNotFoundError,
    InvalidRecordTypeError,
)


def test_add_health_record_stores_entry():
    port = FakeHealthRecordsPort()

    entry = AddHealthRecordUseCase(health_records_port=port).execute(
        AddHealthRecordInput(user_id="user-1", record_type="vitalSigns", data={"heartRate": 72})
    )

    assert entry.record_type == "vitalSigns"
    assert port.entries[entry.id].data == {"heartRate": 72}


def test_add_health_record_rejects_unknown_type():
    with pytest.raises(InvalidRecordTypeError) as exc_info:
        AddHealthRecordUseCase(health_records_port=FakeHealthRecordsPort()).execute(
            AddHealthRecordInput(user_id="user-1", record_type="dreams", data={"x": 1})
        )

    assert exc_info.value.message == "Invalid record type"


@pytest.mark.parametrize("record_type,data", [(None, {"x": 1}), ("allergies", None), ("allergies", {})])
def test_add_health_record_requires_type_and_data(record_type, data):
    with pytest.raises(BadRequestError) as exc_info:
        AddHealthRecordUseCase(health_records_port=FakeHealthRecordsPort()).execute(
            AddHealthRecordInput(user_id="user-1", record_type=record_type, data=data)
        )

    assert exc_info.value.message == "Record type and data are required"


def test_list_health_records_filters_and_sorts():
    port = FakeHealthRecordsPort()
    port.add_entry(entry_id="a", user_id="user-1", record_type="allergies", data={"n": 1}, created_at=NOW)
    port.add_entry(
        entry_id="b",
        user_id="user-1",
        record_type="allergies",
        data={"n": 2},
        created_at=NOW + timedelta(days=1),
    )
    port.add_entry(entry_id="c", user_id="user-1", record_type="medications", data={"n": 3}, created_at=NOW)
    port.add_entry(entry_id="d", user_id="user-2", record_type="allergies", data={"n": 4}, created_at=NOW)
    use_case = ListHealthRecordsUseCase(health_records_port=port)

    allergies = use_case.execute(ListHealthRecordsInput(user_id="user-1", record_type="allergies"))
    everything = use_case.execute(ListHealthRecordsInput(user_id="user-1"))

    assert [entry.id for entry in allergies] == ["b", "a"]
    assert {entry.id for entry in everything} == {"a", "b", "c"}
    with pytest.raises(InvalidRecordTypeError):
        use_case.execute(ListHealthRecordsInput(user_id="user-1", record_type="dreams"))


def test_delete_health_record_missing():
    with pytest.raises(HealthRecordNotFoundError):
        DeleteHealthRecordUseCase(health_records_port=FakeHealthRecordsPort()).execute(
            user_id="user-1",
            record_id="missing",
        )


def _medication_port() -> FakeHealthRecordsPort:
    port = FakeHealthRecordsPort()
    port.add_entry(
        entry_id="med-1",
        user_id="user-1",
        record_type="medications",
        data={"name": "Ibuprofen", "dosage": "200mg", "refills": {"remaining": 2, "total": 3}},
        created_at=NOW,
    )
    return port


def _update_use_case(port: FakeHealthRecordsPort) -> UpdateHealthRecordUseCase:
    return UpdateHealthRecordUseCase(health_records_port=port, clock=lambda: NOW)


def test_update_health_record_merges_allowed_fields():
    port = _medication_port()

    entry = _update_use_case(port).execute(
        UpdateHealthRecordInput(user_id="user-1", record_id="med-1", changes={"dosage": "400mg", "status": "Active"})
    )

    assert entry.data == {
        "name": "Ibuprofen",
        "dosage": "400mg",
        "status": "Active",
        "refills": {"remaining": 2, "total": 3},
    }
    assert port.entries["med-1"].data == entry.data


def test_update_health_record_stamps_refill_date():
    port = _medication_port()

    entry = _update_use_case(port).execute(
        UpdateHealthRecordInput(
            user_id="user-1",
            record_id="med-1",
            changes={"refills": {"remaining": 1, "nextRefillDate": "2024-03-01"}},
        )
    )

    assert entry.data["refills"] == {
        "remaining": 1,
        "total": 3,
        "nextRefillDate": "2024-03-01",
        "lastRefillDate": NOW.isoformat(),
    }


@pytest.mark.parametrize(
    "changes,rejected",
    [
        ({"dosage": "1g", "severity": "Mild"}, ["severity"]),
        ({"refills": {"remaining": 1, "lastRefillDate": "2020-01-01"}}, ["refills.lastRefillDate"]),
    ],
)
def test_update_health_record_rejects_fields_outside_allow_list(changes, rejected):
    port = _medication_port()

    with pytest.raises(DisallowedFieldsError) as exc_info:
        _update_use_case(port).execute(UpdateHealthRecordInput(user_id="user-1", record_id="med-1", changes=changes))

    assert exc_info.value.fields == rejected
    assert port.entries["med-1"].data["dosage"] == "200mg"
    assert port.entries["med-1"].data["refills"] == {"remaining": 2, "total": 3}


def test_update_health_record_requires_changes():
    with pytest.raises(BadRequestError) as exc_info:
        _update_use_case(_medication_port()).execute(
            UpdateHealthRecordInput(user_id="user-1", record_id="med-1", changes={})
        )

    assert exc_info.value.message == "Update data is required"


@pytest.mark.parametrize("user_id,record_id", [("user-1", "missing"), ("user-2", "med-1")])
def test_update_health_record_missing_or_foreign(user_id, record_id):
    with pytest.raises(HealthRecordNotFoundError) as exc_info:
        _update_use_case(_medication_port()).execute(
            UpdateHealthRecordInput(user_id=user_id, record_id=record_id, changes={"dosage": "1g"})
        )

    assert exc_info.value.status_code == 404
