"""
Unit tests for MockingTransport and the mock fetch controllers.
"""

import random
import time
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from rate_limiting_fetch.models.request import FetchRequest
from rate_limiting_fetch.transport.mock import (
    MockFetchInfo,
    MockingTransport,
    RandomMockFetchController,
    SimpleMockFetchController,
    add_no_response_headers,
    add_retry_after_response_header,
)

REQUEST = FetchRequest(url="https://api.example.test/items")


def create_scripted_rng(*values: float) -> MagicMock:
    rng = MagicMock(spec=random.Random)
    rng.random.side_effect = list(values)
    return rng


def create_delegate(status_code: int = 200) -> AsyncMock:
    delegate = AsyncMock()
    delegate.fetch = AsyncMock(
        return_value=httpx.Response(status_code, request=httpx.Request("GET", REQUEST.url))
    )
    delegate.close = AsyncMock()
    return delegate


# ============================================================================
# Header Populators
# ============================================================================


def test_header_populators():
    headers = {}
    add_no_response_headers(headers)
    assert headers == {}

    add_retry_after_response_header(headers)
    assert headers == {"Retry-After": "5"}


# ============================================================================
# SimpleMockFetchController
# ============================================================================


def test_simple_controller_returns_last_set_info():
    info = MockFetchInfo(503, "Service Unavailable")
    controller = SimpleMockFetchController()

    assert controller.get_mock_fetch_info(0) is None

    controller.set_next_mock_fetch_info(info)
    assert controller.get_mock_fetch_info(0) is info
    assert controller.get_mock_fetch_info(0) is info

    controller.set_next_mock_fetch_info(None)
    assert controller.get_mock_fetch_info(0) is None


# ============================================================================
# RandomMockFetchController
# ============================================================================


@pytest.mark.parametrize(
    "millis_since,threshold",
    [(50, 0.7), (500, 0.75), (4000, 0.8), (9000, 0.85), (20000, 0.9)],
)
def test_pass_through_threshold_by_time_since_last_rate_limit(millis_since, threshold):
    assert RandomMockFetchController._pass_through_threshold(millis_since) == threshold


def test_random_controller_passes_through_below_threshold():
    controller = RandomMockFetchController(rng=create_scripted_rng(0.5))

    assert controller.get_mock_fetch_info(0) is None


def test_random_controller_injects_429():
    controller = RandomMockFetchController(rng=create_scripted_rng(0.99, 0.2, 0.9))

    info = controller.get_mock_fetch_info(0)

    assert info.response_status_code == 429
    assert info.response_status_text == "Too Many Requests"
    assert info.add_response_headers is add_retry_after_response_header


def test_random_controller_injects_500_without_headers():
    controller = RandomMockFetchController(rng=create_scripted_rng(0.99, 0.6))

    info = controller.get_mock_fetch_info(0)

    assert info.response_status_code == 500
    assert info.add_response_headers is add_no_response_headers


def test_random_controller_injects_503():
    controller = RandomMockFetchController(rng=create_scripted_rng(0.99, 0.8, 0.1))

    info = controller.get_mock_fetch_info(0)

    assert info.response_status_code == 503
    assert info.response_status_text == "Service Unavailable"
    assert info.add_response_headers is add_no_response_headers


def test_random_controller_more_aggressive_after_recent_rate_limit():
    # 0.72 passes through when the last rate limit is old (threshold 0.9)...
    controller = RandomMockFetchController(rng=create_scripted_rng(0.72))
    assert controller.get_mock_fetch_info(0) is None

    # ...but not right after one (threshold 0.7)
    controller = RandomMockFetchController(rng=create_scripted_rng(0.72, 0.1, 0.1))
    info = controller.get_mock_fetch_info(time.time() * 1000)
    assert info is not None


def test_random_controller_produces_only_retryable_statuses():
    controller = RandomMockFetchController(rng=random.Random(42))

    statuses = set()
    for _ in range(500):
        info = controller.get_mock_fetch_info(0)
        if info is not None:
            statuses.add(info.response_status_code)

    assert statuses <= {429, 500, 503}
    assert statuses


# ============================================================================
# MockingTransport
# ============================================================================


@pytest.mark.asyncio
async def test_passes_through_to_delegate_when_not_mocked():
    delegate = create_delegate(200)
    transport = MockingTransport(delegate=delegate)

    response = await transport.fetch(REQUEST)

    assert response.status_code == 200
    delegate.fetch.assert_awaited_once_with(REQUEST)
    assert transport.time_of_last_rate_limit == 0


@pytest.mark.asyncio
async def test_fabricates_failure_response():
    delegate = create_delegate()
    controller = SimpleMockFetchController(
        MockFetchInfo(429, "Too Many Requests", add_retry_after_response_header)
    )
    transport = MockingTransport(delegate=delegate, controller=controller)

    before = time.time() * 1000
    response = await transport.fetch(REQUEST)

    assert response.status_code == 429
    assert response.reason_phrase == "Too Many Requests"
    assert response.headers.get("Retry-After") == "5"
    assert response.is_success is False
    assert str(response.request.url) == REQUEST.url
    assert transport.time_of_last_rate_limit >= before
    delegate.fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_fabricated_non_ascii_reason_phrase_is_replaced():
    controller = SimpleMockFetchController(MockFetchInfo(503, "Inténtelo más tarde"))
    transport = MockingTransport(delegate=create_delegate(), controller=controller)

    response = await transport.fetch(REQUEST)

    assert response.status_code == 503
    assert response.reason_phrase == "Int?ntelo m?s tarde"


@pytest.mark.asyncio
async def test_controller_receives_time_of_last_rate_limit():
    controller = MagicMock()
    controller.get_mock_fetch_info.side_effect = [MockFetchInfo(500, "Internal Server Error"), None]
    transport = MockingTransport(delegate=create_delegate(), controller=controller)

    await transport.fetch(REQUEST)
    await transport.fetch(REQUEST)

    first_arg = controller.get_mock_fetch_info.call_args_list[0].args[0]
    second_arg = controller.get_mock_fetch_info.call_args_list[1].args[0]
    assert first_arg == 0
    assert second_arg == transport.time_of_last_rate_limit > 0


@pytest.mark.asyncio
async def test_controller_can_be_swapped():
    transport = MockingTransport(delegate=create_delegate())
    transport.set_mock_fetch_controller(
        SimpleMockFetchController(MockFetchInfo(503, "Service Unavailable"))
    )

    response = await transport.fetch(REQUEST)

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_close_closes_delegate():
    delegate = create_delegate()
    transport = MockingTransport(delegate=delegate)

    await transport.close()

    delegate.close.assert_awaited_once()
