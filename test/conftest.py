import asyncio
import json
import sys
from datetime import datetime
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def run(coro):
    return asyncio.run(coro)


class FixedClock:
    def __init__(self, moment: datetime):
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment


def make_store(now: datetime = datetime(2024, 3, 28, 12, 0), **kwargs):
    from bsm.repositories.memory_store import MemoryStore

    return MemoryStore(clock=FixedClock(now), **kwargs)


def seeded_store(now: datetime = datetime(2024, 3, 28, 12, 0), **kwargs):
    from bsm.repositories.seed import seed_demo_data

    return seed_demo_data(make_store(now, **kwargs))


class FakeResponse:
    def __init__(self, status_code=200, body=None, content=None):
        self.status_code = status_code
        self._body = body
        if content is not None:
            self.content = content
        else:
            self.content = b"" if body is None else json.dumps(body).encode("utf-8")

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("no json body")
        return self._body


class FakeSession:
    """Stands in for requests.Session: replays canned responses and records calls."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, json=None, params=None, headers=None, timeout=None):
        self.calls.append({"method": method, "url": url, "json": json, "params": params, "headers": headers})
        reply = self.responses.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply
