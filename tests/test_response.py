"""Unit tests for strict response envelope parsing"""
import copy
import json
import math

import pytest

from prometheus_query import (
    PrometheusError,
    PrometheusErrorType,
    ResponseParseError,
    Stats,
    Status,
    parse_response,
)
from prometheus_query.response import MatrixData, ScalarData, StringData, VectorData

STATS = {
    "timings": {
        "evalTotalTime": 0.000447452,
        "resultSortTime": 0,
        "queryPreparationTime": 0.000112316,
        "innerEvalTime": 0.000311029,
        "execQueueTime": 0.000008033,
        "execTotalTime": 0.000504364,
    },
    "samples": {
        "totalQueryableSamplesPerStep": [[1659268100, 1], [1659268160, 1]],
        "totalQueryableSamples": 4,
        "peakSamples": 4,
    },
}


class TestSuccessEnvelopes:
    """Well-formed success envelopes"""

    def test_vector(self, vector_envelope):
        resp = parse_response(vector_envelope)
        assert resp.status is Status.SUCCESS
        assert resp.is_success and not resp.is_error
        assert isinstance(resp.data, VectorData)
        samples = resp.as_vector()
        assert len(samples) == 1
        assert samples[0].metric == {"__name__": "up", "instance": "localhost:9090", "job": "prometheus"}
        assert samples[0].value == (1617960600.0, "1")
        assert samples[0].timestamp == 1617960600.0
        assert samples[0].sample == "1"
        assert samples[0].as_float() == 1.0

    def test_vector_from_bytes(self, vector_envelope):
        resp = parse_response(json.dumps(vector_envelope).encode())
        assert resp.as_vector()[0].metric["job"] == "prometheus"
        assert resp.result_type == "vector"

    def test_matrix_values_stay_strings(self, matrix_envelope):
        resp = parse_response(json.dumps(matrix_envelope))
        assert isinstance(resp.data, MatrixData)
        series = resp.as_matrix()[0]
        assert [v for _, v in series.values] == ["1", "NaN", "+Inf"]
        floats = series.as_floats()
        assert math.isnan(floats[1][1])
        assert floats[2][1] == math.inf
        assert resp.as_vector() is None

    def test_high_precision_value_is_exact(self):
        raw = {"status": "success",
               "data": {"resultType": "scalar", "result": [1435781451.781, "0.10000000000000000555"]}}
        resp = parse_response(raw)
        assert isinstance(resp.data, ScalarData)
        assert resp.as_scalar()[1] == "0.10000000000000000555"

    def test_string_result(self):
        raw = {"status": "success", "data": {"resultType": "string", "result": [1435781451.781, "hello"]}}
        resp = parse_response(raw)
        assert isinstance(resp.data, StringData)
        assert resp.as_string() == (1435781451.781, "hello")

    def test_warnings_and_infos(self, vector_envelope):
        raw = dict(vector_envelope, warnings=["partial response"], infos=["info"])
        resp = parse_response(raw)
        assert resp.warnings == ["partial response"]
        assert resp.infos == ["info"]

    def test_empty_result(self):
        resp = parse_response({"status": "success", "data": {"resultType": "vector", "result": []}})
        assert resp.as_vector() == []

    def test_stats_block(self, vector_envelope):
        vector_envelope["data"]["stats"] = copy.deepcopy(STATS)
        resp = parse_response(json.dumps(vector_envelope))
        assert isinstance(resp.stats, Stats)
        assert resp.stats.timings.execTotalTime == 0.000504364
        assert resp.stats.samples.totalQueryableSamples == 4
        assert resp.stats.samples.totalQueryableSamplesPerStep == [(1659268100.0, 1), (1659268160.0, 1)]
        assert resp.as_vector()[0].sample == "1"

    def test_stats_without_per_step_samples(self, matrix_envelope):
        matrix_envelope["data"]["stats"] = {
            "timings": {"evalTotalTime": 0.1, "resultSortTime": 0, "queryPreparationTime": 0,
                        "innerEvalTime": 0.1, "execQueueTime": 0, "execTotalTime": 0.1},
            "samples": {"totalQueryableSamples": 9, "peakSamples": 3},
        }
        resp = parse_response(matrix_envelope)
        assert resp.stats.samples.totalQueryableSamplesPerStep is None
        assert resp.stats.samples.peakSamples == 3

    def test_stats_absent(self, vector_envelope):
        assert parse_response(vector_envelope).stats is None

    def test_raise_for_status_returns_self_on_success(self, vector_envelope):
        resp = parse_response(vector_envelope)
        assert resp.raise_for_status() is resp


class TestErrorEnvelopes:
    """status=error is a successful parse of a failed query"""

    def test_error_envelope_parses(self, error_envelope):
        resp = parse_response(error_envelope)
        assert resp.is_error
        assert resp.data is None
        assert resp.errorType == "bad_data"
        assert resp.error_kind is PrometheusErrorType.BAD_DATA

    def test_raise_for_status(self, error_envelope):
        resp = parse_response(error_envelope)
        with pytest.raises(PrometheusError) as exc_info:
            resp.raise_for_status()
        assert exc_info.value.is_bad_data()
        assert not exc_info.value.is_timeout()
        assert "parse error" in exc_info.value.message

    def test_unknown_error_type(self):
        resp = parse_response({"status": "error", "errorType": "something_new", "error": "boom"})
        assert resp.error_kind is None


class TestStrictSchema:
    """Unknown fields and shape mismatches are parse failures"""

    def test_unknown_top_level_field(self, vector_envelope):
        with pytest.raises(ResponseParseError):
            parse_response(dict(vector_envelope, unexpected=True))

    def test_unknown_data_field(self, vector_envelope):
        vector_envelope["data"]["unexpected"] = {}
        with pytest.raises(ResponseParseError):
            parse_response(vector_envelope)

    def test_unknown_stats_field(self, vector_envelope):
        stats = copy.deepcopy(STATS)
        stats["samples"]["series"] = 1
        vector_envelope["data"]["stats"] = stats
        with pytest.raises(ResponseParseError):
            parse_response(vector_envelope)

    def test_unknown_sample_field(self, vector_envelope):
        vector_envelope["data"]["result"][0]["histogram"] = [1, {}]
        with pytest.raises(ResponseParseError):
            parse_response(vector_envelope)

    def test_unknown_status(self, vector_envelope):
        with pytest.raises(ResponseParseError):
            parse_response(dict(vector_envelope, status="pending"))

    def test_unknown_result_type(self):
        with pytest.raises(ResponseParseError):
            parse_response({"status": "success", "data": {"resultType": "streams", "result": []}})

    def test_shape_must_match_result_type(self, matrix_envelope):
        matrix_envelope["data"]["resultType"] = "vector"
        with pytest.raises(ResponseParseError):
            parse_response(matrix_envelope)

    def test_numeric_sample_value_is_rejected(self, vector_envelope):
        vector_envelope["data"]["result"][0]["value"] = [1617960600.0, 1]
        with pytest.raises(ResponseParseError):
            parse_response(vector_envelope)

    def test_missing_status(self):
        with pytest.raises(ResponseParseError):
            parse_response({"data": None})

    def test_invalid_json(self):
        with pytest.raises(ResponseParseError):
            parse_response(b"<html>bad gateway</html>")

    def test_unsupported_payload_type(self):
        with pytest.raises(TypeError):
            parse_response(42)
