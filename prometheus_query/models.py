from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class InstantQuery(BaseModel):
    """瞬时查询，对应 /api/v1/query。由 InstantQueryBuilder.build() 生成。"""
    model_config = ConfigDict(frozen=True, extra="forbid")

    query: str
    # 求值时间（规范化后的 UNIX 时间戳或 RFC3339 字符串）
    time: Optional[str] = None
    timeout: Optional[str] = None
    # 非空即要求服务端返回 data.stats，"all" 额外包含按步长的样本统计
    stats: Optional[str] = None

    @property
    def endpoint(self) -> str:
        return "/api/v1/query"

    def to_params(self) -> List[Tuple[str, str]]:
        params = [("query", self.query)]
        if self.time is not None:
            params.append(("time", self.time))
        if self.timeout is not None:
            params.append(("timeout", self.timeout))
        if self.stats is not None:
            params.append(("stats", self.stats))
        return params


class RangeQuery(BaseModel):
    """范围查询，对应 /api/v1/query_range。start/end/step 均为必填。"""
    model_config = ConfigDict(frozen=True, extra="forbid")

    query: str
    start: str
    end: str
    step: str
    timeout: Optional[str] = None
    # 非空即要求服务端返回 data.stats，"all" 额外包含按步长的样本统计
    stats: Optional[str] = None

    @property
    def endpoint(self) -> str:
        return "/api/v1/query_range"

    def to_params(self) -> List[Tuple[str, str]]:
        params = [
            ("query", self.query),
            ("start", self.start),
            ("end", self.end),
            ("step", self.step),
        ]
        if self.timeout is not None:
            params.append(("timeout", self.timeout))
        if self.stats is not None:
            params.append(("stats", self.stats))
        return params
