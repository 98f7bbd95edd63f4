"""Integration test fixtures (service checks and prerequisites).

Live tests talk to the real Anthropic API and are skipped unless
ANTHROPIC_API_KEY is set in the environment.
"""

import os

import httpx
import pytest


@pytest.fixture(scope="session")
def anthropic_api_key() -> str:
    """Return the live API key, skipping tests if it is missing or rejected."""
    api_key = os.environ.get("ANTHROPIC_API_KEY", "")
    if not api_key:
        pytest.skip("ANTHROPIC_API_KEY not set")

    base_url = os.environ.get("ANTHROPIC_BASE_URL", "https://api.anthropic.com")
    try:
        response = httpx.get(
            f"{base_url.rstrip('/')}/v1/models",
            headers={"x-api-key": api_key, "anthropic-version": "2023-06-01"},
            timeout=5,
        )
    except httpx.HTTPError as e:
        pytest.skip(f"Anthropic API not reachable: {e}")
    if response.status_code != 200:
        pytest.skip(f"Anthropic API not available (status {response.status_code})")
    return api_key
