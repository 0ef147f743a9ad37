from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import pytest


@dataclass
class FakeResponse:
    status_code: int = 200
    text: str = ""

    @property
    def content(self) -> bytes:
        return self.text.encode("utf-8")

    @classmethod
    def json_body(cls, body: Any, status_code: int = 200) -> "FakeResponse":
        return cls(status_code=status_code, text=json.dumps(body))


@dataclass
class FakeSession:
    """Stands in for requests.Session; maps url -> response or exception"""

    routes: Dict[str, Any] = field(default_factory=dict)
    calls: List[Tuple[str, str, Dict[str, Any]]] = field(default_factory=list)

    def _dispatch(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        outcome = self.routes.get(url)
        if outcome is None:
            raise AssertionError(f"No response configured for {url}")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._dispatch("get", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._dispatch("post", url, **kwargs)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()
