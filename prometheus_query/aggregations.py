"""聚合运算符（sum、avg、topk ...），均为 InstantVector -> InstantVector。

渲染格式：
    op (expr)                      无分组
    op by (a,b) (expr)             带分组
    op (param, expr)               带参数（count_values / bottomk / topk / quantile）
"""
from __future__ import annotations

from typing import Callable, Dict, Optional, Union

from .errors import InvalidFunctionArgument
from .utils import format_number, quote_string
from .vector import Grouping, InstantVector, expect_vector

Number = Union[int, float]

AGGREGATIONS: Dict[str, Callable] = {}


def render_aggregation(op: str, vector: InstantVector, labels: Optional[Grouping] = None,
                       parameter: Optional[str] = None) -> InstantVector:
    expect_vector(vector, InstantVector, op)
    if labels is not None and not isinstance(labels, Grouping):
        raise TypeError(f"{op}() grouping must be By or Without, got {type(labels).__name__}")
    args = vector.expr if parameter is None else f"{parameter}, {vector.expr}"
    if labels is None:
        return InstantVector(f"{op} ({args})")
    return InstantVector(f"{op} {labels} ({args})")


def _aggregation(op: str) -> Callable[..., InstantVector]:
    def apply(vector: InstantVector, labels: Optional[Grouping] = None) -> InstantVector:
        return render_aggregation(op, vector, labels)

    apply.__name__ = apply.__qualname__ = op
    apply.__doc__ = f"{op} [by|without (labels)] (vector)"
    AGGREGATIONS[op] = apply
    return apply


sum = _aggregation("sum")
min = _aggregation("min")
max = _aggregation("max")
avg = _aggregation("avg")
group = _aggregation("group")
stddev = _aggregation("stddev")
stdvar = _aggregation("stdvar")
count = _aggregation("count")


def _k(op: str, k: int) -> str:
    if isinstance(k, bool) or not isinstance(k, int) or k < 0:
        raise InvalidFunctionArgument(f"parameter of {op}() must be a non-negative integer, got {k!r}")
    return str(k)


def count_values(vector: InstantVector, labels: Optional[Grouping], label: str) -> InstantVector:
    return render_aggregation("count_values", vector, labels, quote_string(label))


def bottomk(vector: InstantVector, labels: Optional[Grouping], k: int) -> InstantVector:
    return render_aggregation("bottomk", vector, labels, _k("bottomk", k))


def topk(vector: InstantVector, labels: Optional[Grouping], k: int) -> InstantVector:
    return render_aggregation("topk", vector, labels, _k("topk", k))


def quantile(vector: InstantVector, labels: Optional[Grouping], q: Number) -> InstantVector:
    if isinstance(q, bool) or not isinstance(q, (int, float)):
        raise InvalidFunctionArgument(f"parameter of quantile() must be a number, got {q!r}")
    return render_aggregation("quantile", vector, labels, format_number(q))


AGGREGATIONS.update(count_values=count_values, bottomk=bottomk, topk=topk, quantile=quantile)
