"""Unit tests for the Prometheus HTTP transport

Requests are answered by httpx.MockTransport; no network access is made.
"""
import httpx
import pytest

from prometheus_query import (
    InstantQueryBuilder,
    PrometheusConfig,
    PrometheusError,
    PrometheusRestClient,
    RangeQueryBuilder,
    ResponseParseError,
)


def _client(transport, **kwargs):
    return PrometheusRestClient("http://prom:9090/", client=httpx.Client(transport=transport), **kwargs)


class TestExecute:
    """Query submission and response handling"""

    def test_instant_query_get(self, mock_transport, recorded_requests, vector_envelope):
        client = _client(mock_transport(body=vector_envelope))
        query = InstantQueryBuilder().metric("up").with_label("job", "node").at("1618922012").build()

        resp = client.execute(query)

        assert resp.as_vector()[0].sample == "1"
        request = recorded_requests[0]
        assert request.method == "GET"
        assert request.url.path == "/api/v1/query"
        assert request.url.params["query"] == 'up{job="node"}'
        assert request.url.params["time"] == "1618922012"
        assert "timeout" not in request.url.params

    def test_range_query_get(self, mock_transport, recorded_requests, matrix_envelope):
        client = _client(mock_transport(body=matrix_envelope))
        query = (
            RangeQueryBuilder().metric("up")
            .start("1618922012").end("1618925612").step("1m").timeout("30s")
            .build()
        )

        resp = client.execute(query)

        assert resp.result_type == "matrix"
        params = recorded_requests[0].url.params
        assert recorded_requests[0].url.path == "/api/v1/query_range"
        assert params["start"] == "1618922012"
        assert params["end"] == "1618925612"
        assert params["step"] == "1m"
        assert params["timeout"] == "30s"

    def test_stats_param_is_sent(self, mock_transport, recorded_requests, vector_envelope):
        client = _client(mock_transport(body=vector_envelope))
        client.execute(InstantQueryBuilder().metric("up").stats().build())
        assert recorded_requests[0].url.params["stats"] == "all"

    def test_post_form(self, mock_transport, recorded_requests, vector_envelope):
        client = _client(mock_transport(body=vector_envelope), use_post=True)
        client.execute(InstantQueryBuilder().metric("up").build())

        request = recorded_requests[0]
        assert request.method == "POST"
        assert b"query=up" in request.content

    def test_error_envelope_with_4xx_raises_prometheus_error(self, mock_transport, error_envelope):
        client = _client(mock_transport(status_code=400, body=error_envelope))
        with pytest.raises(PrometheusError) as exc_info:
            client.execute(InstantQueryBuilder().metric("up").build())
        assert exc_info.value.is_bad_data()

    def test_error_envelope_with_200_raises_prometheus_error(self, mock_transport):
        body = {"status": "error", "errorType": "timeout", "error": "query timed out"}
        client = _client(mock_transport(body=body))
        with pytest.raises(PrometheusError) as exc_info:
            client.execute(InstantQueryBuilder().metric("up").build())
        assert exc_info.value.is_timeout()

    def test_non_json_error_is_http_error(self, mock_transport):
        client = _client(mock_transport(status_code=502, body=b"bad gateway", content_type="text/plain"))
        with pytest.raises(httpx.HTTPStatusError):
            client.execute(InstantQueryBuilder().metric("up").build())

    def test_strict_parse_failure_propagates(self, mock_transport, vector_envelope):
        client = _client(mock_transport(body=dict(vector_envelope, surprise=1)))
        with pytest.raises(ResponseParseError):
            client.execute(InstantQueryBuilder().metric("up").build())


class TestConstruction:
    """Client construction from explicit configuration"""

    def test_from_config(self, mock_transport, recorded_requests, vector_envelope):
        cfg = PrometheusConfig(baseUrl="http://other:9090", queryTimeout="10s", usePost=True)
        client = PrometheusRestClient.from_config(cfg, client=httpx.Client(transport=mock_transport(body=vector_envelope)))
        assert client.base_url == "http://other:9090"
        assert client.use_post is True

        client.execute(InstantQueryBuilder().metric("up").build())
        assert recorded_requests[0].url.host == "other"

    def test_request_timeout_uses_duration_codec(self):
        with PrometheusRestClient("http://prom:9090", request_timeout="1m30s") as client:
            assert client.client.timeout.read == 90.0

    def test_default_timeout(self):
        with PrometheusRestClient("http://prom:9090") as client:
            assert client.client.timeout.read == 30.0
