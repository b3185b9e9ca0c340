"""Mini README: Shared fixtures for the budget desk tests.

Each test gets its own SQLite file under pytest's ``tmp_path`` so gateway
and API tests never share state.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from filmbudget.interface import create_application
from filmbudget.storage import BudgetGateway, create_gateway


@pytest.fixture
def gateway(tmp_path) -> BudgetGateway:
    return create_gateway(tmp_path / "budget.db")


@pytest.fixture
def client(gateway: BudgetGateway) -> TestClient:
    return TestClient(create_application(gateway))
