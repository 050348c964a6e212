"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from immosim.main import app
from immosim.calculations.viager import SaleMode, ViagerScenario


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def occupied_scenario():
    """Occupied viager from the calculator's default form values."""
    return ViagerScenario(
        market_value=292000,
        age=71,
        sex="Femme",
        discount_rate_pct=2,
        estimated_rent=740,
        upfront_pct=40,
        indexation_rate_pct=1.1,
        mode=SaleMode.occupied,
    )
