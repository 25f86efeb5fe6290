import pytest

from forgd_sale.common.errors import Reentrant
from forgd_sale.guard import ReentrancyGuard, non_reentrant


class Counter:
    def __init__(self):
        self._guard = ReentrancyGuard("counter")
        self.calls = 0
        self.nested_error = None

    @non_reentrant
    def bump(self, nest=False, fail=False):
        self.calls += 1
        if nest:
            try:
                self.bump()
            except Reentrant as e:
                self.nested_error = e
        if fail:
            raise RuntimeError("fail")
        return self.calls


def test_guard_enter_exit():
    guard = ReentrancyGuard()
    assert not guard.entered
    with guard:
        assert guard.entered
    assert not guard.entered


def test_nested_enter_raises():
    guard = ReentrancyGuard("purchase")
    with guard:
        with pytest.raises(Reentrant, match="purchase"):
            with guard:
                pass
        assert guard.entered
    assert not guard.entered


def test_guard_clears_on_error():
    guard = ReentrancyGuard()
    with pytest.raises(KeyError):
        with guard:
            raise KeyError()
    assert not guard.entered


def test_decorator_blocks_nested_call():
    counter = Counter()
    assert counter.bump(nest=True) == 1
    assert isinstance(counter.nested_error, Reentrant)


def test_decorator_allows_sequential_calls_after_failure():
    counter = Counter()
    with pytest.raises(RuntimeError):
        counter.bump(fail=True)
    assert counter.bump() == 2


def test_guards_are_per_instance():
    a, b = Counter(), Counter()
    with a._guard:
        assert b.bump() == 1
