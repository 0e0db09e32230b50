import logging
from threading import Lock

from django.conf import settings

from .signals import connectivity_changed

logger = logging.getLogger(__name__)


class ConnectivityMonitor:
    """
    Holds the station's online/offline flag

    The flag only moves when a platform transition event is reported
    (the browser forwards its online/offline events); nothing here polls
    """

    def __init__(self, initial: bool = None):  # type: ignore
        self._online = settings.SYNC_ASSUME_ONLINE if initial is None else initial
        self._lock = Lock()

    @property
    def is_online(self) -> bool:
        return self._online

    def set_online(self, value: bool, source: str = "unknown") -> bool:
        """Returns True when the flag actually changed"""
        with self._lock:
            if self._online == value:
                return False
            self._online = value

        logger.info(f"Connectivity changed: {'online' if value else 'offline'} (source={source})")
        connectivity_changed.send(sender=self, is_online=value, source=source)
        return True
