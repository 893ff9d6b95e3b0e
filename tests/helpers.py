"""Shared test doubles and request helpers."""

import base64

from apps.api.jobs.dispatcher import Job, JobDispatcher, JobSink


class FakeRedis:
    """
    In-memory subset of the redis-py client used by the session store.

    Values are stored as bytes like the real client returns them.
    advance() moves the clock forward to expire keys.
    """

    def __init__(self):
        self.now = 0.0
        self._data: dict[str, tuple[bytes, float]] = {}

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def _live(self, key: str) -> bytes | None:
        item = self._data.get(key)
        if item is None:
            return None
        value, expires_at = item
        if expires_at <= self.now:
            del self._data[key]
            return None
        return value

    def setex(self, key: str, seconds: int, value: str) -> bool:
        self._data[key] = (str(value).encode("utf-8"), self.now + seconds)
        return True

    def get(self, key: str) -> bytes | None:
        return self._live(key)

    def delete(self, key: str) -> int:
        if self._live(key) is None:
            return 0
        del self._data[key]
        return 1

    def ttl(self, key: str) -> int:
        if self._live(key) is None:
            return -2
        return int(self._data[key][1] - self.now)

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        pass


class RecordingSink(JobSink):
    """Sink that keeps every enqueued job."""

    def __init__(self):
        self.jobs: list[Job] = []

    async def enqueue(self, job: Job) -> None:
        self.jobs.append(job)


class FailingSink(JobSink):
    """Sink whose queue is always unreachable."""

    def __init__(self):
        self.attempts = 0

    async def enqueue(self, job: Job) -> None:
        self.attempts += 1
        raise ConnectionError("queue unreachable")


class RecordingDispatcher(JobDispatcher):
    """Dispatcher that keeps submitted jobs instead of forwarding them."""

    def __init__(self):
        super().__init__(RecordingSink())
        self.jobs: list[Job] = []

    def submit(self, job: Job) -> bool:
        self.jobs.append(job)
        return True


def b64(data: bytes) -> str:
    """Base64-encode bytes for a JSON body."""
    return base64.b64encode(data).decode("ascii")


def basic_auth(email: str, password: str) -> dict[str, str]:
    """Authorization header for Basic credentials."""
    raw = base64.b64encode(f"{email}:{password}".encode()).decode("ascii")
    return {"Authorization": f"Basic {raw}"}


def token_header(token: str) -> dict[str, str]:
    """X-Token header for a session token."""
    return {"X-Token": token}
