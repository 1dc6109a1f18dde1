"""Prometheus 查询响应模型（严格 schema）。

任何层级出现未知字段、类型不符或缺少必填字段都会解析失败（ResponseParseError），
从而让上游 API 的变化显式暴露，而不是静默丢弃数据。

样本值保持为字符串：Prometheus 会用 "NaN"、"+Inf" 或高精度十进制编码数值，
在解析阶段转换为 float 会丢失信息。
"""
from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import PrometheusError, PrometheusErrorType, ResponseParseError

SamplePair = Tuple[float, str]


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class Status(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class VectorSample(_StrictModel):
    metric: Dict[str, str]
    value: SamplePair

    @property
    def timestamp(self) -> float:
        return self.value[0]

    @property
    def sample(self) -> str:
        return self.value[1]

    def as_float(self) -> float:
        return float(self.value[1])


class MatrixSeries(_StrictModel):
    metric: Dict[str, str]
    values: List[SamplePair]

    def as_floats(self) -> List[Tuple[float, float]]:
        return [(ts, float(v)) for ts, v in self.values]


class Timings(_StrictModel):
    """查询各阶段耗时（秒），对应请求参数 stats=all。"""
    evalTotalTime: float
    resultSortTime: float
    queryPreparationTime: float
    innerEvalTime: float
    execQueueTime: float
    execTotalTime: float


class Samples(_StrictModel):
    # 按步长统计的样本数仅在 stats=all 时返回
    totalQueryableSamplesPerStep: Optional[List[Tuple[float, int]]] = None
    totalQueryableSamples: int
    peakSamples: int


class Stats(_StrictModel):
    timings: Timings
    samples: Samples


class VectorData(_StrictModel):
    resultType: Literal["vector"]
    result: List[VectorSample]
    stats: Optional[Stats] = None


class MatrixData(_StrictModel):
    resultType: Literal["matrix"]
    result: List[MatrixSeries]
    stats: Optional[Stats] = None


class ScalarData(_StrictModel):
    resultType: Literal["scalar"]
    result: SamplePair
    stats: Optional[Stats] = None


class StringData(_StrictModel):
    resultType: Literal["string"]
    result: SamplePair
    stats: Optional[Stats] = None


QueryData = Annotated[
    Union[VectorData, MatrixData, ScalarData, StringData],
    Field(discriminator="resultType"),
]


class QueryResponse(_StrictModel):
    status: Status
    data: Optional[QueryData] = None
    errorType: Optional[str] = None
    error: Optional[str] = None
    warnings: Optional[List[str]] = None
    infos: Optional[List[str]] = None

    @property
    def is_success(self) -> bool:
        return self.status is Status.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status is Status.ERROR

    @property
    def error_kind(self) -> Optional[PrometheusErrorType]:
        return PrometheusErrorType.lookup(self.errorType)

    @property
    def result_type(self) -> Optional[str]:
        return self.data.resultType if self.data is not None else None

    @property
    def stats(self) -> Optional[Stats]:
        return self.data.stats if self.data is not None else None

    def raise_for_status(self) -> "QueryResponse":
        if self.is_error:
            logger.error(f"Prometheus 返回 error errorType={self.errorType} error={self.error}")
            raise PrometheusError(self.errorType, self.error)
        return self

    def as_vector(self) -> Optional[List[VectorSample]]:
        return self.data.result if isinstance(self.data, VectorData) else None

    def as_matrix(self) -> Optional[List[MatrixSeries]]:
        return self.data.result if isinstance(self.data, MatrixData) else None

    def as_scalar(self) -> Optional[SamplePair]:
        return self.data.result if isinstance(self.data, ScalarData) else None

    def as_string(self) -> Optional[SamplePair]:
        return self.data.result if isinstance(self.data, StringData) else None


def parse_response(raw: Union[bytes, str, Dict[str, Any]]) -> QueryResponse:
    """把传输层返回的原始 JSON（bytes / str / 已解析的 dict）解析为 QueryResponse。"""
    try:
        if isinstance(raw, (bytes, bytearray, str)):
            return QueryResponse.model_validate_json(raw)
        if isinstance(raw, dict):
            return QueryResponse.model_validate(raw)
    except ValidationError as e:
        logger.error(f"响应解析失败: {e}")
        raise ResponseParseError(f"Invalid Prometheus response: {e}") from e
    raise TypeError(f"unsupported response payload type: {type(raw).__name__}")
