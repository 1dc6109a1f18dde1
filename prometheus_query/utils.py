from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Union

from .errors import InvalidTimeSpecifier

TimeLike = Union[str, int, float, datetime]

_FLOAT_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")

# RFC3339 / RFC3339Nano，小数位 1~9 位，时区为 Z 或 ±HH:MM
_RFC3339_NANO_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,9}))?([Zz]|[+-]\d{2}:\d{2})$"
)


def format_number(value: Union[int, float]) -> str:
    """按 PromQL 字面量渲染数值：整数值不带 .0，NaN/Inf 使用 PromQL 关键字。"""
    if isinstance(value, bool):
        raise TypeError("bool is not a PromQL number")
    if isinstance(value, int):
        return str(value)
    f = float(value)
    if math.isnan(f):
        return "NaN"
    if math.isinf(f):
        return "Inf" if f > 0 else "-Inf"
    # repr 为最短可还原表示，>= 1e16 时使用指数形式，避免展开成数百位整数
    text = repr(f)
    return text[:-2] if text.endswith(".0") else text


def quote_string(text: str) -> str:
    """渲染为双引号 PromQL 字符串字面量（转义反斜杠、双引号与换行）。"""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def _trim_fraction(nanos: int) -> str:
    if nanos == 0:
        return ""
    if nanos % 1_000_000 == 0:
        return f".{nanos // 1_000_000:03d}"
    if nanos % 1_000 == 0:
        return f".{nanos // 1_000:06d}"
    return f".{nanos:09d}"


def canonical_float_timestamp(text: str) -> str:
    """解析 UNIX 时间戳(秒，可带小数)，返回规范字符串；非法时抛 ValueError。"""
    if not _FLOAT_RE.match(text):
        raise ValueError(f"not a float timestamp: {text!r}")
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"timestamp out of range: {text!r}")
    return format_number(value)


def canonical_rfc3339(text: str) -> str:
    """解析 RFC3339(Nano) 字符串并统一转换为 UTC，以 Z 结尾重新序列化。
    小数部分按 0/3/6/9 位输出，保留纳秒精度。"""
    m = _RFC3339_NANO_RE.match(text)
    if not m:
        raise ValueError(f"not an RFC3339 timestamp: {text!r}")
    y, mo, d, h, mi, s, frac, tz = m.groups()
    frac_str = (frac or "").ljust(9, "0")
    nanos = int(frac_str or "0")

    if tz in ("Z", "z"):
        offset = timedelta(0)
    else:
        sign = 1 if tz[0] == "+" else -1
        th, tm = int(tz[1:3]), int(tz[4:6])
        if tm >= 60:
            raise ValueError(f"invalid UTC offset: {tz}")
        offset = sign * timedelta(hours=th, minutes=tm)

    try:
        local = datetime(int(y), int(mo), int(d), int(h), int(mi), int(s), tzinfo=timezone(offset))
        utc = local.astimezone(timezone.utc)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"invalid RFC3339 timestamp {text!r}: {e}") from e
    return utc.strftime("%Y-%m-%dT%H:%M:%S") + _trim_fraction(nanos) + "Z"


def canonical_datetime(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    utc = dt.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S") + _trim_fraction(utc.microsecond * 1_000) + "Z"


def canonicalize_timestamp(value: TimeLike) -> str:
    """把 float 时间戳 / RFC3339 字符串 / datetime 统一为规范字符串。

    同一时刻的不同文本写法（如 "1618922012" 与 "1618922012.0"）得到相同结果。
    """
    if isinstance(value, datetime):
        return canonical_datetime(value)
    if isinstance(value, bool):
        raise InvalidTimeSpecifier(f"invalid time specifier: {value!r}")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise InvalidTimeSpecifier(f"invalid time specifier: {value!r}")
        return format_number(value)
    if not isinstance(value, str):
        raise InvalidTimeSpecifier(f"invalid time specifier: {value!r}")
    text = value.strip()
    try:
        return canonical_float_timestamp(text)
    except ValueError:
        pass
    try:
        return canonical_rfc3339(text)
    except ValueError as e:
        raise InvalidTimeSpecifier(f"invalid time specifier: {value!r}") from e
