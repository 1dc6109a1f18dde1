"""Pytest configuration and shared fixtures"""
import json

import httpx
import pytest

from prometheus_query import InstantVector, RangeVector, Selector


@pytest.fixture
def http_requests():
    """Instant vector over http_requests_total{job="apiserver"}"""
    return Selector.metric("http_requests_total").eq("job", "apiserver").instant()


@pytest.fixture
def http_requests_5m():
    """Range vector over http_requests_total{job="apiserver"}[5m]"""
    return Selector.metric("http_requests_total").eq("job", "apiserver").range("5m")


@pytest.fixture
def plain_vector():
    return InstantVector("X")


@pytest.fixture
def plain_range():
    return RangeVector("X[5m]")


@pytest.fixture
def vector_envelope():
    """Well-formed success envelope with a single vector sample"""
    return {
        "status": "success",
        "data": {
            "resultType": "vector",
            "result": [
                {
                    "metric": {"__name__": "up", "instance": "localhost:9090", "job": "prometheus"},
                    "value": [1617960600.0, "1"],
                }
            ],
        },
    }


@pytest.fixture
def matrix_envelope():
    return {
        "status": "success",
        "data": {
            "resultType": "matrix",
            "result": [
                {
                    "metric": {"__name__": "up", "job": "node"},
                    "values": [[1435781430.781, "1"], [1435781445.781, "NaN"], [1435781460.781, "+Inf"]],
                }
            ],
        },
    }


@pytest.fixture
def error_envelope():
    return {
        "status": "error",
        "errorType": "bad_data",
        "error": 'invalid parameter "query": 1:5: parse error',
    }


@pytest.fixture
def recorded_requests():
    return []


@pytest.fixture
def mock_transport(recorded_requests):
    """Build an httpx.MockTransport answering every request with (status, body)"""

    def factory(status_code=200, body=None, content_type="application/json"):
        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            payload = body if isinstance(body, (bytes, str)) else json.dumps(body)
            return httpx.Response(status_code, content=payload, headers={"content-type": content_type})

        return httpx.MockTransport(handler)

    return factory
