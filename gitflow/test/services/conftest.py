from __future__ import annotations

import pytest

from gitflow.test.services.fakes import FakeGateway


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()
