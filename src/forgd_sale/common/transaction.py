"""
Savepoint-based unit of work.

Every participant exposes ``snapshot()`` and ``restore(snapshot)``. ``atomic``
takes a snapshot of each participant on entry and, if the body raises, restores
all of them in reverse order before re-raising. Nothing is done on success.
"""
import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Sequence, Tuple

from forgd_sale.token.interfaces import Transactional


log = logging.getLogger(__name__)


@contextmanager
def atomic(participants: Sequence[Any], label: str = "operation") -> Iterator[None]:
    savepoints: List[Tuple[Transactional, Any]] = []
    opaque: List[Any] = []
    for participant in participants:
        if isinstance(participant, Transactional):
            savepoints.append((participant, participant.snapshot()))
        else:
            opaque.append(participant)
    try:
        yield
    except Exception as exc:
        for participant, snap in reversed(savepoints):
            participant.restore(snap)
        log.warning("%s aborted and rolled back: %r", label, exc)
        if opaque:
            log.warning(
                "%s: %d participant(s) cannot be rolled back: %s",
                label, len(opaque), ", ".join(type(p).__name__ for p in opaque),
            )
        raise
