"""Prometheus 复合时长（如 "1h30m"、"1m30s500ms"）的解析与格式化。"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from .errors import InvalidTimeDuration


class DurationUnit(Enum):
    # (后缀, 毫秒数, 规范排序序号；序号小的排在前面)
    YEARS = ("y", 365 * 24 * 3600 * 1000, 0)
    WEEKS = ("w", 7 * 24 * 3600 * 1000, 1)
    DAYS = ("d", 24 * 3600 * 1000, 2)
    HOURS = ("h", 3600 * 1000, 3)
    MINUTES = ("m", 60 * 1000, 4)
    SECONDS = ("s", 1000, 5)
    MILLISECONDS = ("ms", 1, 6)

    @property
    def suffix(self) -> str:
        return self.value[0]

    @property
    def milliseconds(self) -> int:
        return self.value[1]

    @property
    def rank(self) -> int:
        return self.value[2]


# ms 必须先于 m / s 匹配
_SUFFIX_PRIORITY = [
    DurationUnit.MILLISECONDS,
    DurationUnit.SECONDS,
    DurationUnit.MINUTES,
    DurationUnit.HOURS,
    DurationUnit.DAYS,
    DurationUnit.WEEKS,
    DurationUnit.YEARS,
]


@dataclass(frozen=True)
class Duration:
    amount: int
    unit: DurationUnit

    def __post_init__(self):
        if isinstance(self.amount, bool) or not isinstance(self.amount, int) or self.amount < 0:
            raise InvalidTimeDuration(f"duration amount must be a non-negative integer: {self.amount!r}")

    def __str__(self) -> str:
        return f"{self.amount}{self.unit.suffix}"

    @property
    def milliseconds(self) -> int:
        return self.amount * self.unit.milliseconds

    @classmethod
    def years(cls, n: int) -> "Duration":
        return cls(n, DurationUnit.YEARS)

    @classmethod
    def weeks(cls, n: int) -> "Duration":
        return cls(n, DurationUnit.WEEKS)

    @classmethod
    def days(cls, n: int) -> "Duration":
        return cls(n, DurationUnit.DAYS)

    @classmethod
    def hours(cls, n: int) -> "Duration":
        return cls(n, DurationUnit.HOURS)

    @classmethod
    def minutes(cls, n: int) -> "Duration":
        return cls(n, DurationUnit.MINUTES)

    @classmethod
    def seconds(cls, n: int) -> "Duration":
        return cls(n, DurationUnit.SECONDS)

    @classmethod
    def millis(cls, n: int) -> "Duration":
        return cls(n, DurationUnit.MILLISECONDS)


def sort_durations(durations: Iterable[Duration]) -> List[Duration]:
    """按规范顺序（y→w→d→h→m→s→ms）稳定排序。"""
    return sorted(durations, key=lambda d: d.unit.rank)


def parse_duration(text: str) -> List[Duration]:
    """从左到右扫描「数字+单位」片段，返回按规范顺序排序的 Duration 列表。

    任何片段非法（缺数字、缺单位、未知单位、单位重复）或输入为空时抛 InvalidTimeDuration。
    """
    if not isinstance(text, str) or not text:
        raise InvalidTimeDuration(f"invalid time duration: {text!r}")

    result: List[Duration] = []
    seen = set()
    pos = 0
    n = len(text)
    while pos < n:
        start = pos
        while pos < n and "0" <= text[pos] <= "9":
            pos += 1
        digits = text[start:pos]
        unit = next((u for u in _SUFFIX_PRIORITY if text.startswith(u.suffix, pos)), None)
        if not digits or unit is None:
            raise InvalidTimeDuration(f"invalid time duration: {text!r}")
        if unit in seen:
            raise InvalidTimeDuration(f"duplicate unit {unit.suffix!r} in time duration: {text!r}")
        seen.add(unit)
        result.append(Duration(int(digits), unit))
        pos += len(unit.suffix)
    return sort_durations(result)


def format_duration(durations: Iterable[Duration]) -> str:
    return "".join(str(d) for d in sort_durations(durations))


def normalize_duration(text: str) -> str:
    """校验并返回规范化的时长文本，例如 "30s1m" -> "1m30s"。"""
    return format_duration(parse_duration(text))


def total_milliseconds(durations: Iterable[Duration]) -> int:
    return sum(d.milliseconds for d in durations)


def total_seconds(durations: Iterable[Duration]) -> float:
    return total_milliseconds(durations) / 1000.0
