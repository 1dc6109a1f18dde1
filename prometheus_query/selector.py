from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from loguru import logger

from .duration import normalize_duration
from .errors import IllegalVectorSelector, InvalidMetricName
from .utils import quote_string
from .vector import InstantVector, RangeVector

# 这些关键字不能作为指标名出现在选择器开头
RESERVED_METRIC_NAMES = frozenset({"bool", "on", "ignoring", "group_left", "group_right"})

METRIC_NAME_LABEL = "__name__"


def validate_metric_name(name: str) -> str:
    if name in RESERVED_METRIC_NAMES:
        raise InvalidMetricName(f"'{name}' is a reserved PromQL keyword and cannot be used as metric name")
    return name


class MatchOp(str, Enum):
    EQUAL = "="
    NOT_EQUAL = "!="
    REGEX_EQUAL = "=~"
    REGEX_NOT_EQUAL = "!~"


@dataclass(frozen=True)
class LabelMatcher:
    name: str
    value: str
    op: MatchOp = MatchOp.EQUAL

    def __str__(self) -> str:
        return f"{self.name}{self.op.value}{quote_string(self.value)}"

    @classmethod
    def equal(cls, name: str, value: str) -> "LabelMatcher":
        return cls(name, value, MatchOp.EQUAL)

    @classmethod
    def not_equal(cls, name: str, value: str) -> "LabelMatcher":
        return cls(name, value, MatchOp.NOT_EQUAL)

    @classmethod
    def regex_equal(cls, name: str, value: str) -> "LabelMatcher":
        return cls(name, value, MatchOp.REGEX_EQUAL)

    @classmethod
    def regex_not_equal(cls, name: str, value: str) -> "LabelMatcher":
        return cls(name, value, MatchOp.REGEX_NOT_EQUAL)


def render_matchers(matchers) -> str:
    return ",".join(str(m) for m in matchers)


@dataclass(frozen=True)
class Selector:
    """不可变的标签匹配器序列，每次追加都返回新的 Selector。

    >>> str(Selector.metric("up").eq("job", "node"))
    '{__name__="up",job="node"}'
    """

    matchers: Tuple[LabelMatcher, ...] = ()

    @classmethod
    def metric(cls, name: str) -> "Selector":
        return cls().with_metric(name)

    def with_metric(self, name: str) -> "Selector":
        validate_metric_name(name)
        return Selector((LabelMatcher.equal(METRIC_NAME_LABEL, name),) + self.matchers)

    def _append(self, matcher: LabelMatcher) -> "Selector":
        return Selector(self.matchers + (matcher,))

    def eq(self, name: str, value: str) -> "Selector":
        return self._append(LabelMatcher.equal(name, value))

    def ne(self, name: str, value: str) -> "Selector":
        return self._append(LabelMatcher.not_equal(name, value))

    def re(self, name: str, value: str) -> "Selector":
        return self._append(LabelMatcher.regex_equal(name, value))

    def nre(self, name: str, value: str) -> "Selector":
        return self._append(LabelMatcher.regex_not_equal(name, value))

    with_label = eq
    without_label = ne
    match_label = re
    no_match_label = nre

    def __str__(self) -> str:
        return "{" + render_matchers(self.matchers) + "}"

    def __len__(self) -> int:
        return len(self.matchers)

    def _require_matchers(self) -> None:
        if not self.matchers:
            raise IllegalVectorSelector("a vector selector needs a metric name or at least one label matcher")

    def instant(self) -> InstantVector:
        self._require_matchers()
        return InstantVector(str(self))

    def range(self, duration: str) -> RangeVector:
        self._require_matchers()
        window = normalize_duration(duration)
        logger.debug(f"构造范围向量 selector={self} window={window}")
        return RangeVector(f"{self}[{window}]")
