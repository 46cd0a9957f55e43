"""Integration test fixtures (service checks and prerequisites).

Integration tests talk to a real public API and are skipped when it is
not reachable.
"""

import httpx
import pytest

LIVE_API_URL = "https://icanhazdadjoke.com/j/0189hNRf2g"


@pytest.fixture(scope="session")
def check_live_api():
    """Check if the live API is reachable.
    
    Skips tests if it is not.
    """
    try:
        response = httpx.get(LIVE_API_URL, headers={"Accept": "application/json"}, timeout=5)
        if response.status_code != 200:
            pytest.skip(f"Live API not available ({response.status_code} status)")
    except httpx.HTTPError as e:
        pytest.skip(f"Live API not available: {e}")
    return LIVE_API_URL
