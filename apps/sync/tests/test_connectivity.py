from django.test import override_settings

from apps.sync.connectivity import ConnectivityMonitor
from apps.sync.signals import connectivity_changed


class TestConnectivityMonitor:
    def test_initial_state_comes_from_settings(self):
        with override_settings(SYNC_ASSUME_ONLINE=False):
            assert ConnectivityMonitor().is_online is False
        with override_settings(SYNC_ASSUME_ONLINE=True):
            assert ConnectivityMonitor().is_online is True

    def test_transition_sends_signal(self):
        monitor = ConnectivityMonitor(initial=False)
        events = []

        def receiver(sender, is_online, source, **kwargs):
            events.append((is_online, source))

        connectivity_changed.connect(receiver, sender=monitor)
        try:
            assert monitor.set_online(True, source="browser") is True
            assert monitor.set_online(False, source="browser") is True
        finally:
            connectivity_changed.disconnect(receiver, sender=monitor)

        assert events == [(True, "browser"), (False, "browser")]
        assert monitor.is_online is False

    def test_repeated_state_is_ignored(self):
        monitor = ConnectivityMonitor(initial=True)
        events = []

        def receiver(sender, **kwargs):
            events.append(kwargs["is_online"])

        connectivity_changed.connect(receiver, sender=monitor)
        try:
            assert monitor.set_online(True) is False
        finally:
            connectivity_changed.disconnect(receiver, sender=monitor)

        assert events == []
