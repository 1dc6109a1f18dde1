"""PromQL 函数。

所有函数都由同一个渲染例程 `render_function` 生成：按 (函数名, 输入向量种类, 输出向量种类)
登记在 FUNCTIONS 中，输出格式为 "fn(expr[, args...])"，从不修改输入。
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Type, TypeVar, Union

from .errors import InvalidFunctionArgument
from .utils import format_number, quote_string
from .vector import InstantVector, RangeVector, expect_vector

S = TypeVar("S", InstantVector, RangeVector)
R = TypeVar("R", InstantVector, RangeVector)

Number = Union[int, float]


@dataclass(frozen=True)
class FunctionSpec:
    name: str
    source: type
    result: type
    # 向量之前的参数个数（如 histogram_quantile(q, v)），其余参数排在向量之后
    leading_args: int = 0


FUNCTIONS: Dict[str, FunctionSpec] = {}


def render_function(name: str, vector, *args: str):
    """按 FUNCTIONS 登记的种类校验输入并渲染调用表达式。"""
    spec = FUNCTIONS[name]
    expect_vector(vector, spec.source, name)
    split = spec.leading_args
    rendered = [*args[:split], vector.expr, *args[split:]]
    return spec.result(f"{name}({', '.join(rendered)})")


def _register(name: str, source: type, result: type, leading_args: int = 0) -> None:
    FUNCTIONS[name] = FunctionSpec(name, source, result, leading_args)


def _function(name: str, source: Type[S], result: Type[R]) -> Callable[[S], R]:
    _register(name, source, result)

    def apply(vector: S) -> R:
        return render_function(name, vector)

    apply.__name__ = apply.__qualname__ = name
    apply.__doc__ = f"{name}({source.__name__}) -> {result.__name__}"
    return apply


# instant -> instant
abs = _function("abs", InstantVector, InstantVector)
absent = _function("absent", InstantVector, InstantVector)
ceil = _function("ceil", InstantVector, InstantVector)
exp = _function("exp", InstantVector, InstantVector)
floor = _function("floor", InstantVector, InstantVector)
ln = _function("ln", InstantVector, InstantVector)
log2 = _function("log2", InstantVector, InstantVector)
log10 = _function("log10", InstantVector, InstantVector)
sgn = _function("sgn", InstantVector, InstantVector)
scalar = _function("scalar", InstantVector, InstantVector)
sort = _function("sort", InstantVector, InstantVector)
sort_desc = _function("sort_desc", InstantVector, InstantVector)
timestamp = _function("timestamp", InstantVector, InstantVector)
day_of_month = _function("day_of_month", InstantVector, InstantVector)
day_of_week = _function("day_of_week", InstantVector, InstantVector)
days_in_month = _function("days_in_month", InstantVector, InstantVector)
hour = _function("hour", InstantVector, InstantVector)
minute = _function("minute", InstantVector, InstantVector)
month = _function("month", InstantVector, InstantVector)
year = _function("year", InstantVector, InstantVector)
acos = _function("acos", InstantVector, InstantVector)
acosh = _function("acosh", InstantVector, InstantVector)
asin = _function("asin", InstantVector, InstantVector)
asinh = _function("asinh", InstantVector, InstantVector)
atan = _function("atan", InstantVector, InstantVector)
atanh = _function("atanh", InstantVector, InstantVector)
cos = _function("cos", InstantVector, InstantVector)
cosh = _function("cosh", InstantVector, InstantVector)
sin = _function("sin", InstantVector, InstantVector)
sinh = _function("sinh", InstantVector, InstantVector)
tan = _function("tan", InstantVector, InstantVector)
tanh = _function("tanh", InstantVector, InstantVector)
deg = _function("deg", InstantVector, InstantVector)
rad = _function("rad", InstantVector, InstantVector)

# range -> instant
rate = _function("rate", RangeVector, InstantVector)
irate = _function("irate", RangeVector, InstantVector)
increase = _function("increase", RangeVector, InstantVector)
delta = _function("delta", RangeVector, InstantVector)
idelta = _function("idelta", RangeVector, InstantVector)
deriv = _function("deriv", RangeVector, InstantVector)
resets = _function("resets", RangeVector, InstantVector)
changes = _function("changes", RangeVector, InstantVector)
avg_over_time = _function("avg_over_time", RangeVector, InstantVector)
min_over_time = _function("min_over_time", RangeVector, InstantVector)
max_over_time = _function("max_over_time", RangeVector, InstantVector)
sum_over_time = _function("sum_over_time", RangeVector, InstantVector)
count_over_time = _function("count_over_time", RangeVector, InstantVector)
stddev_over_time = _function("stddev_over_time", RangeVector, InstantVector)
stdvar_over_time = _function("stdvar_over_time", RangeVector, InstantVector)
last_over_time = _function("last_over_time", RangeVector, InstantVector)
present_over_time = _function("present_over_time", RangeVector, InstantVector)
absent_over_time = _function("absent_over_time", RangeVector, InstantVector)

# 带额外参数的函数
_register("round", InstantVector, InstantVector)
_register("clamp", InstantVector, InstantVector)
_register("clamp_min", InstantVector, InstantVector)
_register("clamp_max", InstantVector, InstantVector)
_register("label_replace", InstantVector, InstantVector)
_register("label_join", InstantVector, InstantVector)
_register("histogram_quantile", InstantVector, InstantVector, leading_args=1)
_register("quantile_over_time", RangeVector, InstantVector, leading_args=1)
_register("predict_linear", RangeVector, InstantVector)
_register("holt_winters", RangeVector, InstantVector)


def round(vector: InstantVector, to_nearest: Optional[Number] = None) -> InstantVector:
    if to_nearest is None:
        return render_function("round", vector)
    return render_function("round", vector, format_number(to_nearest))


def clamp(vector: InstantVector, min: Number, max: Number) -> InstantVector:
    return render_function("clamp", vector, format_number(min), format_number(max))


def clamp_min(vector: InstantVector, min: Number) -> InstantVector:
    return render_function("clamp_min", vector, format_number(min))


def clamp_max(vector: InstantVector, max: Number) -> InstantVector:
    return render_function("clamp_max", vector, format_number(max))


def histogram_quantile(quantile: Number, vector: InstantVector) -> InstantVector:
    return render_function("histogram_quantile", vector, format_number(quantile))


def quantile_over_time(quantile: Number, vector: RangeVector) -> InstantVector:
    return render_function("quantile_over_time", vector, format_number(quantile))


def predict_linear(vector: RangeVector, seconds: Number) -> InstantVector:
    return render_function("predict_linear", vector, format_number(seconds))


def holt_winters(vector: RangeVector, sf: Number, tf: Number) -> InstantVector:
    """平滑因子 sf / tf 必须位于 (0, 1) 开区间。"""
    if not (0 < sf < 1) or not (0 < tf < 1):
        raise InvalidFunctionArgument("smoothing factors in holt_winters() must be between 0.0 (excl.) and 1.0 (excl.)")
    return render_function("holt_winters", vector, format_number(sf), format_number(tf))


def label_replace(vector: InstantVector, dst_label: str, replacement: str, src_label: str,
                  regex: str) -> InstantVector:
    if not dst_label:
        raise InvalidFunctionArgument("destination label name in label_replace() cannot be empty")
    return render_function(
        "label_replace", vector,
        quote_string(dst_label), quote_string(replacement), quote_string(src_label), quote_string(regex),
    )


def label_join(vector: InstantVector, dst_label: str, separator: str, *src_labels: str) -> InstantVector:
    if not dst_label:
        raise InvalidFunctionArgument("destination label name in label_join() cannot be empty")
    if not src_labels:
        raise InvalidFunctionArgument("list of source label names in label_join() cannot be empty")
    return render_function(
        "label_join", vector,
        quote_string(dst_label), quote_string(separator), *(quote_string(s) for s in src_labels),
    )
