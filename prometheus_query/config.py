from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ValidationError, field_validator
from loguru import logger

from .duration import normalize_duration


class PrometheusConfig(BaseModel):
    baseUrl: str
    # HTTP 请求超时，格式如 15s、1m30s；为空时使用 30s
    queryTimeout: Optional[str] = None
    # 查询语句较长时可改用 POST 表单提交
    usePost: bool = False

    @field_validator("queryTimeout")
    @classmethod
    def _check_timeout(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return normalize_duration(v)


class GlobalConfig(BaseModel):
    prometheusConfig: PrometheusConfig


@dataclass
class ConfigManager:
    global_config: GlobalConfig

    @property
    def prometheus(self) -> PrometheusConfig:
        return self.global_config.prometheusConfig

    @property
    def base_url(self) -> str:
        return self.prometheus.baseUrl

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "ConfigManager":
        try:
            gc = GlobalConfig.model_validate(raw)
        except ValidationError as e:
            logger.error(f"配置校验失败: {e}")
            raise RuntimeError(f"Invalid config: {e}") from e
        return ConfigManager(global_config=gc)

    @staticmethod
    def load(path: Optional[str] = None) -> "ConfigManager":
        cfg_path = path or os.getenv("PROM_CONFIG_PATH") or os.path.abspath("config.json")
        logger.debug(f"加载配置文件: {cfg_path}")
        with open(cfg_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        cm = ConfigManager.from_dict(raw)
        pc = cm.prometheus
        logger.info(f"配置加载成功: promBase={pc.baseUrl} timeout={pc.queryTimeout or 'default'} post={pc.usePost}")
        return cm
