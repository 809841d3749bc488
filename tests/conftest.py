from __future__ import annotations

import pytest
from fakes import FakeHttpSession


@pytest.fixture
def http_session() -> FakeHttpSession:
    return FakeHttpSession()
