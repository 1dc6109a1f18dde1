"""查询构造器：把指标名、标签匹配器、时间参数与超时组装为不可变的查询对象。

仅有 InstantQueryBuilder 与 RangeQueryBuilder 两种实现，共享 _QueryBuilder 中的累积状态；
再派生其它子类会抛出 TypeError。
"""
from __future__ import annotations

from typing import List, Optional, Union

from loguru import logger

from .duration import normalize_duration
from .errors import IllegalRangeQuery, IllegalVectorSelector
from .models import InstantQuery, RangeQuery
from .selector import LabelMatcher, render_matchers, validate_metric_name
from .utils import TimeLike, canonicalize_timestamp
from .vector import InstantVector, RangeVector, expect_vector


class _QueryBuilder:
    _sealed = False

    def __init_subclass__(cls, **kwargs):
        if _QueryBuilder._sealed:
            raise TypeError(f"{cls.__name__}: only InstantQueryBuilder and RangeQueryBuilder may extend _QueryBuilder")
        super().__init_subclass__(**kwargs)

    def __init__(self) -> None:
        self._metric: Optional[str] = None
        self._matchers: List[LabelMatcher] = []
        self._expression: Optional[str] = None
        self._timeout: Optional[str] = None
        self._stats: Optional[str] = None

    def metric(self, name: str):
        self._metric = validate_metric_name(name)
        return self

    def with_label(self, label: str, value: str):
        self._matchers.append(LabelMatcher.equal(label, value))
        return self

    def without_label(self, label: str, value: str):
        self._matchers.append(LabelMatcher.not_equal(label, value))
        return self

    def match_label(self, label: str, value: str):
        self._matchers.append(LabelMatcher.regex_equal(label, value))
        return self

    def no_match_label(self, label: str, value: str):
        self._matchers.append(LabelMatcher.regex_not_equal(label, value))
        return self

    def timeout(self, timeout: str):
        # 解析失败直接抛出 InvalidTimeDuration，不保留旧值
        self._timeout = normalize_duration(timeout)
        return self

    def stats(self, level: str = "all"):
        self._stats = level
        return self

    def _set_expression(self, vector: Union[InstantVector, RangeVector]) -> None:
        self._expression = vector.expr

    def _query_string(self) -> str:
        if self._expression is not None:
            if self._metric is not None or self._matchers:
                raise IllegalVectorSelector("a full expression cannot be combined with metric or label matchers")
            return self._expression
        if self._matchers:
            labels = "{" + render_matchers(self._matchers) + "}"
            return f"{self._metric}{labels}" if self._metric is not None else labels
        if self._metric is not None:
            return self._metric
        raise IllegalVectorSelector("a vector selector needs a metric name or at least one label matcher")


class InstantQueryBuilder(_QueryBuilder):
    """
    用法:
        q = InstantQueryBuilder().metric("up").with_label("job", "node").at("1618922012").build()
        q.to_params() -> [("query", 'up{job="node"}'), ("time", "1618922012")]
    """

    def __init__(self) -> None:
        super().__init__()
        self._time: Optional[str] = None

    def expression(self, vector: Union[InstantVector, RangeVector]) -> "InstantQueryBuilder":
        expect_vector(vector, (InstantVector, RangeVector), "expression")
        self._set_expression(vector)
        return self

    def at(self, time: TimeLike) -> "InstantQueryBuilder":
        self._time = canonicalize_timestamp(time)
        return self

    def build(self) -> InstantQuery:
        query = InstantQuery(query=self._query_string(), time=self._time, timeout=self._timeout,
                             stats=self._stats)
        logger.debug(f"构造瞬时查询 query={query.query[:120]} time={query.time} timeout={query.timeout}")
        return query


class RangeQueryBuilder(_QueryBuilder):
    """范围查询构造器，start / end / step 缺一不可。"""

    def __init__(self) -> None:
        super().__init__()
        self._start: Optional[str] = None
        self._end: Optional[str] = None
        self._step: Optional[str] = None

    def expression(self, vector: InstantVector) -> "RangeQueryBuilder":
        expect_vector(vector, InstantVector, "expression")
        self._set_expression(vector)
        return self

    def start(self, time: TimeLike) -> "RangeQueryBuilder":
        self._start = canonicalize_timestamp(time)
        return self

    def end(self, time: TimeLike) -> "RangeQueryBuilder":
        self._end = canonicalize_timestamp(time)
        return self

    def step(self, step: str) -> "RangeQueryBuilder":
        self._step = normalize_duration(step)
        return self

    def build(self) -> RangeQuery:
        query_string = self._query_string()
        missing = [name for name, value in (("start", self._start), ("end", self._end), ("step", self._step))
                   if value is None]
        if missing:
            raise IllegalRangeQuery(f"range query is missing: {', '.join(missing)}")
        query = RangeQuery(query=query_string, start=self._start, end=self._end, step=self._step,
                           timeout=self._timeout, stats=self._stats)
        logger.debug(f"构造范围查询 query={query.query[:120]} start={query.start} end={query.end} step={query.step}")
        return query


_QueryBuilder._sealed = True
