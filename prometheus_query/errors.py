from __future__ import annotations

from enum import Enum
from typing import Optional


class QueryBuilderError(ValueError):
    """构造 PromQL / 查询参数阶段的校验错误基类。"""


class InvalidMetricName(QueryBuilderError):
    pass


class InvalidTimeSpecifier(QueryBuilderError):
    pass


class InvalidTimeDuration(QueryBuilderError):
    pass


class IllegalVectorSelector(QueryBuilderError):
    pass


class IllegalRangeQuery(QueryBuilderError):
    pass


class InvalidFunctionArgument(QueryBuilderError):
    pass


class ResponseParseError(ValueError):
    """响应 JSON 不符合严格 schema（未知字段、类型错误、缺失字段）。"""


class PrometheusErrorType(str, Enum):
    TIMEOUT = "timeout"
    CANCELED = "canceled"
    EXECUTION = "execution"
    BAD_DATA = "bad_data"
    INTERNAL = "internal"
    UNAVAILABLE = "unavailable"
    NOT_FOUND = "not_found"

    @classmethod
    def lookup(cls, raw: Optional[str]) -> Optional["PrometheusErrorType"]:
        if raw is None:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None


class PrometheusError(RuntimeError):
    """Prometheus 返回 status=error 时抛出，携带 errorType / error。"""

    def __init__(self, error_type: Optional[str], message: Optional[str]):
        self.error_type = error_type
        self.message = message or ""
        super().__init__(f"{error_type}: {self.message}")

    @property
    def kind(self) -> Optional[PrometheusErrorType]:
        return PrometheusErrorType.lookup(self.error_type)

    def is_timeout(self) -> bool:
        return self.kind is PrometheusErrorType.TIMEOUT

    def is_canceled(self) -> bool:
        return self.kind is PrometheusErrorType.CANCELED

    def is_execution(self) -> bool:
        return self.kind is PrometheusErrorType.EXECUTION

    def is_bad_data(self) -> bool:
        return self.kind is PrometheusErrorType.BAD_DATA

    def is_internal(self) -> bool:
        return self.kind is PrometheusErrorType.INTERNAL

    def is_unavailable(self) -> bool:
        return self.kind is PrometheusErrorType.UNAVAILABLE

    def is_not_found(self) -> bool:
        return self.kind is PrometheusErrorType.NOT_FOUND
