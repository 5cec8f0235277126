"""Tests for the connectivity signal."""

from projectsync.sync import ConnectivitySignal


class TestConnectivitySignal:
    def test_initial_state(self):
        assert ConnectivitySignal().is_online is False
        assert ConnectivitySignal(online=True).is_online is True

    def test_notifies_on_change_only(self):
        signal = ConnectivitySignal()
        seen: list[bool] = []
        signal.subscribe(seen.append)
        signal.set_online(True)
        signal.set_online(True)
        signal.set_online(False)
        signal.set_online(False)
        assert seen == [True, False]

    def test_unsubscribe(self):
        signal = ConnectivitySignal()
        seen: list[bool] = []
        unsubscribe = signal.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        signal.set_online(True)
        assert seen == []
