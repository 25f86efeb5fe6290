"""
Non-reentrancy latch.

Typical pattern:

    with guard:
        ...  # critical section; a nested `with guard:` raises Reentrant

or, on a method of an object holding the guard as `self._guard`:

    @non_reentrant
    def purchase(self, ...):
        ...

The latch is cleared on every exit path. It only stops a call from being
re-entered by its own side effects; serializing independent callers is the
job of the distributor's lock.
"""
import functools

from forgd_sale.common.errors import Reentrant


class ReentrancyGuard:
    def __init__(self, name: str = "default"):
        self.name = name
        self._entered = False

    @property
    def entered(self) -> bool:
        return self._entered

    def enter(self):
        if self._entered:
            raise Reentrant(f"Reentrant call into guarded section '{self.name}'.")
        self._entered = True

    def exit(self):
        self._entered = False

    def __enter__(self):
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exit()
        return False


def non_reentrant(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._guard:
            return method(self, *args, **kwargs)
    return wrapper
