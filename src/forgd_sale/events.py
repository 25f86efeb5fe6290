import logging
from typing import Any, List, Optional

from forgd_sale.common.enums import SaleEvent
from forgd_sale.common.model import EventRecord


log = logging.getLogger(__name__)


class EventLog:
    """Append-only sequence of observability records."""

    def __init__(self):
        self._records: List[EventRecord] = []

    def emit(self, event: SaleEvent, **fields: Any) -> EventRecord:
        record = EventRecord(event=event, fields=fields, sequence=len(self._records))
        self._records.append(record)
        log.info("%s %s", event, fields)
        return record

    def records(self, event: Optional[SaleEvent] = None) -> List[EventRecord]:
        if event is None:
            return list(self._records)
        return [r for r in self._records if r.event == event]

    def __len__(self) -> int:
        return len(self._records)

    def snapshot(self) -> int:
        return len(self._records)

    def restore(self, snapshot: int) -> None:
        del self._records[snapshot:]
