from __future__ import annotations

from typing import Optional, Union

import httpx
from loguru import logger

from .config import ConfigManager, PrometheusConfig
from .duration import parse_duration, total_seconds
from .models import InstantQuery, RangeQuery
from .response import QueryResponse, parse_response

# Prometheus 对以下状态码返回 JSON 错误信封（bad_data / execution / timeout 等）
_ERROR_ENVELOPE_STATUS = (400, 422, 503)

Query = Union[InstantQuery, RangeQuery]


class PrometheusRestClient:
    """把已构造好的查询提交给 Prometheus HTTP API，并解析为 QueryResponse。

    不做重试；网络错误（httpx.HTTPError）原样向上抛出。
    """

    def __init__(self, base_url: str, request_timeout: Optional[str] = None, *,
                 use_post: bool = False, client: Optional[httpx.Client] = None):
        self.base_url = base_url.rstrip("/")
        self.use_post = use_post
        timeout_seconds = total_seconds(parse_duration(request_timeout)) if request_timeout else 30.0
        logger.debug(f"初始化 PrometheusRestClient base_url={self.base_url} timeout={timeout_seconds}s post={use_post}")
        self.client = client or httpx.Client(timeout=timeout_seconds)

    @classmethod
    def from_config(cls, cfg: Union[ConfigManager, PrometheusConfig], *,
                    client: Optional[httpx.Client] = None) -> "PrometheusRestClient":
        pcfg = cfg.prometheus if isinstance(cfg, ConfigManager) else cfg
        return cls(pcfg.baseUrl, request_timeout=pcfg.queryTimeout, use_post=pcfg.usePost, client=client)

    def _send(self, query: Query) -> httpx.Response:
        url = f"{self.base_url}{query.endpoint}"
        params = query.to_params()
        if self.use_post:
            return self.client.post(url, data=dict(params))
        return self.client.get(url, params=params)

    @staticmethod
    def _is_json(r: httpx.Response) -> bool:
        return "application/json" in r.headers.get("content-type", "")

    def execute(self, query: Query) -> QueryResponse:
        """执行瞬时或范围查询；status=error 时抛出 PrometheusError。"""
        is_range = isinstance(query, RangeQuery)
        extra = {k: v for k, v in query.to_params() if k != "query"}
        logger.debug(
            f"执行{'范围' if is_range else '瞬时'}查询 endpoint={query.endpoint} "
            f"params={extra} query={query.query[:120]}"
        )
        r = self._send(query)
        try:
            if r.status_code in _ERROR_ENVELOPE_STATUS and self._is_json(r):
                parse_response(r.content).raise_for_status()
            r.raise_for_status()
            resp = parse_response(r.content).raise_for_status()
        except Exception:
            logger.exception("Prometheus 查询失败")
            raise
        result = resp.data.result if resp.data is not None else None
        size = len(result) if isinstance(result, list) else (1 if result is not None else 0)
        logger.info(f"查询完成 type={resp.result_type} size={size}")
        if resp.warnings:
            logger.warning(f"Prometheus warnings: {resp.warnings}")
        return resp

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "PrometheusRestClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
