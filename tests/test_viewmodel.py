"""Tests for CounterViewModel."""

import pytest

from vmstate import CounterViewModel, DisposedError, LookupState

USERS = {"7": "Grace Hopper"}


class TestCounterViewModel:
    def test_count_reserved(self, manual_executor):
        vm = CounterViewModel(5, USERS.__getitem__, executor=manual_executor)
        log = []
        vm.counter.subscribe(log.append)
        vm.plus_one()
        vm.plus_one()
        vm.clear()
        assert log == [5, 6, 7, 0]

    def test_get_user(self, manual_executor):
        vm = CounterViewModel(0, USERS.__getitem__, executor=manual_executor, timeout=None)
        users = []
        vm.user.subscribe(users.append)
        vm.get_user("7")
        manual_executor.finish(0)
        assert users == ["Grace Hopper"]

    def test_failed_lookup_leaves_counter_alone(self, manual_executor):
        vm = CounterViewModel(3, USERS.__getitem__, executor=manual_executor, timeout=None)
        vm.get_user("nobody")
        manual_executor.finish(0)
        assert vm.user.state is LookupState.FAILED
        assert vm.counter.get() == 3

    def test_dispose_silences_everything(self, manual_executor):
        counts, users = [], []
        with CounterViewModel(1, USERS.__getitem__, executor=manual_executor, timeout=None) as vm:
            vm.counter.subscribe(counts.append)
            vm.user.subscribe(users.append)
            vm.get_user("7")
            manual_executor.start(0)

        manual_executor.finish(0)
        assert counts == [1]
        assert users == []
        with pytest.raises(DisposedError):
            vm.plus_one()
