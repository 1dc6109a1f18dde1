"""PromQL 向量类型。

InstantVector 与 RangeVector 是两个互不继承的包装类型，函数/聚合的签名以此区分
可接受的向量种类；传入错误种类时在运行期抛出 TypeError。
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Type, Union

from .errors import InvalidFunctionArgument


def expect_vector(value, kind: Union[Type, Tuple[Type, ...]], func: str):
    if not isinstance(value, kind):
        kinds = kind if isinstance(kind, tuple) else (kind,)
        expected = " or ".join(k.__name__ for k in kinds)
        raise TypeError(f"{func}() expects {expected}, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class RangeVector:
    expr: str

    def __str__(self) -> str:
        return self.expr


@dataclass(frozen=True)
class InstantVector:
    expr: str
    # 由二元运算生成的表达式，作为另一个二元运算的操作数时需要加括号
    binary: bool = field(default=False, compare=False, repr=False)

    def __str__(self) -> str:
        return self.expr

    def add(self, other: "InstantVector", match: Optional["VectorMatch"] = None,
            group: Optional["GroupModifier"] = None) -> "InstantVector":
        return binary_op("+", self, other, match, group)

    def sub(self, other: "InstantVector", match: Optional["VectorMatch"] = None,
            group: Optional["GroupModifier"] = None) -> "InstantVector":
        return binary_op("-", self, other, match, group)

    def mul(self, other: "InstantVector", match: Optional["VectorMatch"] = None,
            group: Optional["GroupModifier"] = None) -> "InstantVector":
        return binary_op("*", self, other, match, group)

    def div(self, other: "InstantVector", match: Optional["VectorMatch"] = None,
            group: Optional["GroupModifier"] = None) -> "InstantVector":
        return binary_op("/", self, other, match, group)

    def mod(self, other: "InstantVector", match: Optional["VectorMatch"] = None,
            group: Optional["GroupModifier"] = None) -> "InstantVector":
        return binary_op("%", self, other, match, group)

    def pow(self, other: "InstantVector", match: Optional["VectorMatch"] = None,
            group: Optional["GroupModifier"] = None) -> "InstantVector":
        return binary_op("^", self, other, match, group)

    subtract = sub

    def __add__(self, other):
        return self.add(other) if isinstance(other, InstantVector) else NotImplemented

    def __sub__(self, other):
        return self.sub(other) if isinstance(other, InstantVector) else NotImplemented

    def __mul__(self, other):
        return self.mul(other) if isinstance(other, InstantVector) else NotImplemented

    def __truediv__(self, other):
        return self.div(other) if isinstance(other, InstantVector) else NotImplemented

    def __mod__(self, other):
        return self.mod(other) if isinstance(other, InstantVector) else NotImplemented

    def __pow__(self, other):
        return self.pow(other) if isinstance(other, InstantVector) else NotImplemented


Vector = Union[InstantVector, RangeVector]


class _LabelList:
    keyword = ""

    def __init__(self, labels: Sequence[str] = ()):
        if isinstance(labels, str):
            labels = [labels]
        self.labels: Tuple[str, ...] = tuple(labels)

    def __str__(self) -> str:
        return f"{self.keyword} ({','.join(self.labels)})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self.labels)!r})"

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self.labels == other.labels

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.labels))


class Grouping(_LabelList):
    """聚合分组子句：by (...) / without (...)"""


class By(Grouping):
    keyword = "by"


class Without(Grouping):
    keyword = "without"


class VectorMatch(_LabelList):
    """二元运算的向量匹配：on (...) / ignoring (...)"""


class On(VectorMatch):
    keyword = "on"


class Ignoring(VectorMatch):
    keyword = "ignoring"


class GroupModifier(_LabelList):
    """多对一 / 一对多匹配：group_left (...) / group_right (...)"""


class GroupLeft(GroupModifier):
    keyword = "group_left"


class GroupRight(GroupModifier):
    keyword = "group_right"


def _operand(vector: InstantVector) -> str:
    return f"({vector.expr})" if vector.binary else vector.expr


def binary_op(op: str, lhs: InstantVector, rhs: InstantVector,
              match: Optional[VectorMatch] = None, group: Optional[GroupModifier] = None) -> InstantVector:
    expect_vector(lhs, InstantVector, op)
    expect_vector(rhs, InstantVector, op)
    if group is not None and match is None:
        raise InvalidFunctionArgument(f"{group.keyword} requires an on/ignoring vector matching clause")
    parts = [_operand(lhs), op]
    if match is not None:
        parts.append(str(match))
    if group is not None:
        parts.append(str(group))
    parts.append(_operand(rhs))
    return InstantVector(" ".join(parts), binary=True)
