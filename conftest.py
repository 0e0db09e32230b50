import itertools

import pytest


class FakeApiClient:
    """
    Stand-in for the central API

    Every call is recorded as (method, endpoint, body). Failure rules make
    matching calls raise RemoteError, optionally only a limited number of times.
    """

    def __init__(self):
        self.calls = []
        self.rules = []
        self.catalogs = {}
        self.on_call = None
        self._ids = itertools.count(1)

    def fail(self, method=None, endpoint=None, times=None, status_code=503):
        self.rules.append({"method": method, "endpoint": endpoint, "times": times, "status_code": status_code})

    def calls_for(self, method):
        return [call for call in self.calls if call[0] == method]

    def _record(self, method, endpoint, body=None):
        from apps.sync.client import RemoteError

        self.calls.append((method, endpoint, body))
        if self.on_call is not None:
            self.on_call(method, endpoint, body)

        for rule in self.rules:
            if rule["method"] and rule["method"] != method:
                continue
            if rule["endpoint"] and rule["endpoint"] != endpoint:
                continue
            if rule["times"] is not None:
                if rule["times"] <= 0:
                    continue
                rule["times"] -= 1
            raise RemoteError(f"{method} {endpoint} returned HTTP {rule['status_code']}", status_code=rule["status_code"])

    def get(self, endpoint):
        self._record("GET", endpoint)
        return self.catalogs.get(endpoint, [])

    def post(self, endpoint, body=None):
        self._record("POST", endpoint, body)
        return {"id": f"srv-{next(self._ids)}", **(body or {})}

    def patch(self, endpoint, body=None):
        self._record("PATCH", endpoint, body)
        return body or {}

    def delete(self, endpoint):
        self._record("DELETE", endpoint)
        return None


class RecordingScheduler:
    def __init__(self):
        self.scheduled = 0
        self.cancelled = 0

    def schedule(self):
        self.scheduled += 1

    def cancel(self):
        self.cancelled += 1


class ImmediateScheduler(RecordingScheduler):
    """Runs the drain synchronously instead of on a timer"""

    def __init__(self):
        super().__init__()
        self.engine = None
        self.reports = []

    def schedule(self):
        super().schedule()
        self.reports.append(self.engine.drain())


@pytest.fixture
def api_client():
    return FakeApiClient()


@pytest.fixture
def queue():
    from apps.sync.queue import OperationQueue

    return OperationQueue(max_attempts=5)


@pytest.fixture
def monitor():
    from apps.sync.connectivity import ConnectivityMonitor

    return ConnectivityMonitor(initial=True)


@pytest.fixture
def scheduler():
    return RecordingScheduler()


@pytest.fixture
def engine(queue, api_client, monitor, scheduler):
    from apps.sync.engine import SyncEngine

    return SyncEngine(queue=queue, client=api_client, monitor=monitor, scheduler=scheduler)


@pytest.fixture
def service(queue):
    from apps.inspections.services import InspectionService

    return InspectionService(queue=queue)
