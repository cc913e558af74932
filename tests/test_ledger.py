from __future__ import annotations

import threading
from datetime import datetime

import pytest

from iotcmd.core.catalog import default_catalog
from iotcmd.core.errors import InvalidRecordStateError
from iotcmd.core.ledger import ExecutionLedger
from iotcmd.core.model import AckCode, EmptyPayload, ExecutionOutcome, TransportOption


def _command():
    return default_catalog().lookup("rebootDevice")


def test_begin_appends_pending_record() -> None:
    ledger = ExecutionLedger(clock=lambda: datetime(2025, 1, 19, 8, 30, 5))
    record_id = ledger.begin(_command(), {"devId": "dev-1"}, TransportOption.BLE)

    (record,) = ledger.all()
    assert record.id == record_id
    assert record.outcome is None
    assert record.is_pending
    assert record.payload == EmptyPayload()
    assert record.transport is TransportOption.BLE
    assert record.parameters == {"devId": "dev-1"}
    assert record.formatted_timestamp == "08:30:05"


def test_complete_sets_outcome_once() -> None:
    ledger = ExecutionLedger()
    record_id = ledger.begin(_command(), {}, TransportOption.MQTT)
    ledger.complete(record_id, ExecutionOutcome.success("ok"), AckCode(1))

    record = next(r for r in ledger.all() if r.id == record_id)
    assert record.outcome == ExecutionOutcome.success("ok")
    assert record.payload == AckCode(1)

    with pytest.raises(InvalidRecordStateError):
        ledger.complete(record_id, ExecutionOutcome.failure("again"), AckCode(2))


def test_complete_unknown_id_rejected() -> None:
    ledger = ExecutionLedger()
    with pytest.raises(InvalidRecordStateError):
        ledger.complete("missing", ExecutionOutcome.failure("nope"))


def test_parameter_snapshot_is_detached() -> None:
    ledger = ExecutionLedger()
    values = {"devId": "dev-1"}
    ledger.begin(_command(), values)
    values["devId"] = "dev-2"

    record = ledger.all()[0]
    assert record.parameters["devId"] == "dev-1"
    with pytest.raises(TypeError):
        record.parameters["devId"] = "dev-3"  # type: ignore[index]


def test_records_keep_insertion_order_and_retries_are_new_records() -> None:
    ledger = ExecutionLedger()
    first = ledger.begin(_command(), {})
    ledger.complete(first, ExecutionOutcome.failure("timeout"))
    second = ledger.begin(_command(), {})

    records = ledger.all()
    assert [r.id for r in records] == [first, second]
    assert records[0].outcome == ExecutionOutcome.failure("timeout")
    assert records[1].outcome is None


def test_clear_is_idempotent() -> None:
    ledger = ExecutionLedger()
    for _ in range(3):
        ledger.begin(_command(), {})
    ledger.clear()
    assert ledger.all() == ()
    ledger.clear()
    assert len(ledger) == 0


def test_cleared_record_cannot_be_completed() -> None:
    ledger = ExecutionLedger()
    record_id = ledger.begin(_command(), {})
    ledger.clear()
    with pytest.raises(InvalidRecordStateError):
        ledger.complete(record_id, ExecutionOutcome.success("late"))


def test_set_expanded_does_not_touch_outcome() -> None:
    ledger = ExecutionLedger()
    record_id = ledger.begin(_command(), {})
    ledger.set_expanded(record_id, True)
    record = ledger.all()[0]
    assert record.ui_expanded is True
    assert record.outcome is None
    ledger.complete(record_id, ExecutionOutcome.success("ok"))
    assert ledger.all()[0].ui_expanded is True


def test_concurrent_begin_and_complete() -> None:
    ledger = ExecutionLedger()

    def worker() -> None:
        for _ in range(50):
            record_id = ledger.begin(_command(), {})
            ledger.complete(record_id, ExecutionOutcome.success("ok"))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    records = ledger.all()
    assert len(records) == 200
    assert len({r.id for r in records}) == 200
    assert all(r.outcome is not None for r in records)
