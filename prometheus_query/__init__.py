from loguru import logger
import os, sys

# 初始化日志（允许通过环境变量 PROMQ_LOG_LEVEL 调整级别）
_level = os.getenv("PROMQ_LOG_LEVEL", "INFO")
logger.remove()
logger.add(sys.stderr, level=_level, enqueue=True,
           format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{line} | {message}")

from .errors import (  # noqa: E402
    IllegalRangeQuery,
    IllegalVectorSelector,
    InvalidFunctionArgument,
    InvalidMetricName,
    InvalidTimeDuration,
    InvalidTimeSpecifier,
    PrometheusError,
    PrometheusErrorType,
    QueryBuilderError,
    ResponseParseError,
)
from .duration import Duration, DurationUnit, format_duration, normalize_duration, parse_duration  # noqa: E402
from .selector import LabelMatcher, MatchOp, Selector  # noqa: E402
from .vector import (  # noqa: E402
    By,
    GroupLeft,
    GroupRight,
    Ignoring,
    InstantVector,
    On,
    RangeVector,
    Without,
)
from .builder import InstantQueryBuilder, RangeQueryBuilder  # noqa: E402
from .models import InstantQuery, RangeQuery  # noqa: E402
from .response import QueryResponse, Stats, Status, parse_response  # noqa: E402
from .config import ConfigManager, PrometheusConfig  # noqa: E402
from .prom_client import PrometheusRestClient  # noqa: E402
from . import aggregations, functions  # noqa: E402

__all__ = [
    "aggregations",
    "functions",
    "Duration",
    "DurationUnit",
    "parse_duration",
    "format_duration",
    "normalize_duration",
    "LabelMatcher",
    "MatchOp",
    "Selector",
    "InstantVector",
    "RangeVector",
    "By",
    "Without",
    "On",
    "Ignoring",
    "GroupLeft",
    "GroupRight",
    "InstantQueryBuilder",
    "RangeQueryBuilder",
    "InstantQuery",
    "RangeQuery",
    "QueryResponse",
    "Stats",
    "Status",
    "parse_response",
    "ConfigManager",
    "PrometheusConfig",
    "PrometheusRestClient",
    "QueryBuilderError",
    "InvalidMetricName",
    "InvalidTimeSpecifier",
    "InvalidTimeDuration",
    "IllegalVectorSelector",
    "IllegalRangeQuery",
    "InvalidFunctionArgument",
    "ResponseParseError",
    "PrometheusError",
    "PrometheusErrorType",
]
