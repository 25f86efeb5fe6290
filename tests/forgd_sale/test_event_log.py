import logging

from forgd_sale.common.enums import SaleEvent
from forgd_sale.events import EventLog


def test_emit_appends_with_sequence():
    log = EventLog()
    first = log.emit(SaleEvent.FEE_CHANGED, new_fee_bps=5)
    second = log.emit(SaleEvent.REFUND_ISSUED, buyer="alice", amount=10)
    assert (first.sequence, second.sequence) == (0, 1)
    assert len(log) == 2
    assert log.records() == [first, second]


def test_records_filter_by_kind():
    log = EventLog()
    log.emit(SaleEvent.FEE_CHANGED, new_fee_bps=5)
    refund = log.emit(SaleEvent.REFUND_ISSUED, buyer="alice", amount=10)
    assert log.records(SaleEvent.REFUND_ISSUED) == [refund]


def test_records_returns_copy():
    log = EventLog()
    log.emit(SaleEvent.FEE_CHANGED, new_fee_bps=5)
    log.records().clear()
    assert len(log) == 1


def test_restore_truncates():
    log = EventLog()
    log.emit(SaleEvent.FEE_CHANGED, new_fee_bps=5)
    snap = log.snapshot()
    log.emit(SaleEvent.FEE_CHANGED, new_fee_bps=6)
    log.restore(snap)
    assert [r.fields["new_fee_bps"] for r in log.records()] == [5]


def test_emit_logs_at_info(caplog):
    log = EventLog()
    with caplog.at_level(logging.INFO, logger="forgd_sale.events"):
        log.emit(SaleEvent.SALE_LISTED, token_id="0x1", receiver="c", max_supply=1)
    assert "SALE_LISTED" in caplog.text
