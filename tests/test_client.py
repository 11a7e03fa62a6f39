"""
tests/test_client.py — SDK TrustBrokerClient contra o app em memória.
"""
import httpx
import pytest
from httpx import ASGITransport

from trust_broker.client import TrustBrokerClient
from trust_broker.main import app


def _client(project: str, url: str) -> TrustBrokerClient:
    return TrustBrokerClient(
        base_url="http://broker/",
        project=project,
        url=url,
        transport=ASGITransport(app=app),
    )


async def test_register_stores_base_key(http):
    svc = _client("svcA", "http://a")

    base_key = await svc.register()

    assert svc.base_key == base_key
    assert svc.identity_headers() == {
        "X-Project-Id": "svcA",
        "X-Project-Domain-Name": "http://a",
        "X-Api-Key": base_key,
    }


async def test_token_round_trip_between_services(http):
    svc_a = _client("svcA", "http://a")
    svc_b = _client("svcB", "http://b")
    await svc_a.register()
    await svc_b.register()

    token = await svc_a.get_token("svcB", "http://b")
    verdict = await svc_b.validate("svcA", token["apiKey"], "http://a")

    assert verdict == {"valid": True, "requester": "svcA"}


async def test_rejected_token_is_a_verdict_not_an_exception(http):
    svc_b = _client("svcB", "http://b")
    await svc_b.register()

    verdict = await svc_b.validate("svcA", "forged", "http://a")

    assert verdict == {"valid": False, "error": "Invalid or expired key"}


async def test_get_token_is_cached(http, register):
    svc_a = _client("svcA", "http://a")
    await svc_a.register()
    await _client("svcB", "http://b").register()

    first = await svc_a.get_token("svcB", "http://b")
    # Rotação por fora: uma request real agora daria 403
    await register("svcA", "http://a")
    second = await svc_a.get_token("svcB", "http://b")

    assert second == first


async def test_http_errors_propagate(http):
    svc_a = _client("svcA", "http://a")

    with pytest.raises(httpx.HTTPStatusError):
        await svc_a.get_token("svcB", "http://b")
