"""
gitcmp - 配置模块

负责 HTTP 传输配置的加载、解析与强类型转换。
支持从 TOML 文件、环境变量或字典中加载配置。
"""

import logging
import os
import re
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from . import __version__
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = f"gitcmp/{__version__}"
DEFAULT_MAX_BODY_BYTES = 32 * 1024 * 1024

# RFC 9110 token
_HEADER_NAME = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


@dataclass(frozen=True)
class GitcmpConfig:
    """HttpClient 的强类型配置对象。

    所有字段均为只读 (frozen=True)，确保配置在运行时不可变。

    Attributes:
        timeout: 单次请求的超时秒数 (连接与读取)。
        user_agent: 请求头 User-Agent。
        max_body_bytes: 允许读取的最大响应体字节数。
        extra_headers: 额外请求头，(名, 值) 元组序列。
    """

    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
    extra_headers: tuple[tuple[str, str], ...] = ()

    def __repr__(self) -> str:
        """隐藏 Header 值，防止日志泄露 Token 等敏感信息。"""
        names = ", ".join(name for name, _ in self.extra_headers)
        return (
            f"<{self.__class__.__name__} "
            f"timeout={self.timeout}, "
            f"user_agent='{self.user_agent}', "
            f"max_body_bytes={self.max_body_bytes}, "
            f"extra_headers=[{names}]>"
        )


def _parse_headers(raw: Any) -> tuple[tuple[str, str], ...]:
    """解析额外请求头。

    支持三种形式:
    1. dict: {"Authorization": "Bearer x"}
    2. list: [["Authorization", "Bearer x"]] 或 ["Authorization: Bearer x"]
    3. str: "Authorization: Bearer x; X-Foo: bar"
    """
    if isinstance(raw, dict):
        items = [(str(k), str(v)) for k, v in raw.items()]
    else:
        if isinstance(raw, str):
            raw = [part for part in raw.split(";") if part.strip()]
        items = []
        for entry in raw:
            if isinstance(entry, str):
                name, sep, value = entry.partition(":")
                if not sep:
                    raise ConfigError(f"Header 格式无效: {entry!r}")
            else:
                name, value = entry
            items.append((str(name), str(value)))

    headers = []
    for name, value in items:
        name, value = name.strip(), value.strip()
        if not name:
            raise ConfigError("Header 名不能为空")
        if not _HEADER_NAME.fullmatch(name):
            raise ConfigError(f"Header 名含非法字符: {name!r}")
        if any(c in value for c in "\r\n\x00"):
            raise ConfigError(f"Header {name} 的值含控制字符")
        headers.append((name, value))
    return tuple(headers)


def create_config_from_dict(raw_data: dict[str, Any]) -> GitcmpConfig:
    """通用工厂：将字典转换为强类型配置对象。

    负责字段的清洗、默认值注入和类型转换。所有字段都是可选的。

    Args:
        raw_data: 原始配置字典 (来自 TOML 或 Env)。

    Returns:
        GitcmpConfig: 验证并转换后的配置对象。

    Raises:
        ConfigError: 当字段格式错误时抛出。
    """
    try:
        timeout = float(raw_data.get("timeout", DEFAULT_TIMEOUT))
        if timeout <= 0:
            raise ConfigError(f"timeout 必须为正数: {timeout}")

        max_body_bytes = int(raw_data.get("max_body_bytes", DEFAULT_MAX_BODY_BYTES))
        if max_body_bytes <= 0:
            raise ConfigError(f"max_body_bytes 必须为正数: {max_body_bytes}")

        user_agent = str(raw_data.get("user_agent", DEFAULT_USER_AGENT)).strip()
        if not user_agent:
            raise ConfigError("user_agent 不能为空")

        return GitcmpConfig(
            timeout=timeout,
            user_agent=user_agent,
            max_body_bytes=max_body_bytes,
            extra_headers=_parse_headers(raw_data.get("headers", ())),
        )

    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"配置生成失败: {e}") from e


def _select_table(data: dict[str, Any], profile: str) -> dict[str, Any]:
    """在 TOML 文档中定位配置表，并合并 profile 覆盖项。

    pyproject.toml 中的 [tool.gitcmp] 视为文档根。根表中除 profile 之外的
    键是公共值，[profile.xxx] 中的键覆盖它们。
    """
    root = data.get("tool", {}).get("gitcmp", data)
    base = {k: v for k, v in root.items() if k != "profile"}
    profiles = root.get("profile", {})

    if profile in profiles:
        logger.debug(f"使用预设 [profile.{profile}]")
        return {**base, **profiles[profile]}
    if profile != "default":
        raise ConfigError(f"未找到预设: [profile.{profile}]")
    return base


def load_config_from_toml(file_path: Path, profile: str = "default") -> GitcmpConfig:
    """从 TOML 文件加载配置。

    既可以是独立的 gitcmp.toml，也可以是带 [tool.gitcmp] 表的 pyproject.toml。
    "default" 预设不存在时只使用公共值；其他预设不存在时报错。

    Args:
        file_path: TOML 文件路径。
        profile: 配置预设名。默认为 "default"。

    Returns:
        GitcmpConfig: 配置对象。

    Raises:
        ConfigError: 文件读取失败或 Profile 不存在。
    """
    if not file_path.exists():
        raise ConfigError(f"配置文件未找到: {file_path}")

    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except Exception as e:
        raise ConfigError(f"读取 TOML 失败: {e}") from e

    return create_config_from_dict(_select_table(data, profile))


def load_config_from_env() -> GitcmpConfig:
    """从环境变量加载配置。

    读取以 `GITCMP_` 开头的环境变量，并映射到配置字段。
    例如: `GITCMP_TIMEOUT` -> `timeout`。

    Returns:
        GitcmpConfig: 配置对象。

    Raises:
        ConfigError: 未检测到任何相关环境变量。
    """
    env_map = {
        "timeout": "TIMEOUT",
        "user_agent": "USER_AGENT",
        "max_body_bytes": "MAX_BODY_BYTES",
        "headers": "HEADERS",
    }

    raw_data = {}

    for cfg_key, env_suffix in env_map.items():
        val = os.environ.get(f"GITCMP_{env_suffix}")
        if val is not None:
            raw_data[cfg_key] = val

    if not raw_data:
        raise ConfigError("未检测到 GITCMP_ 前缀的环境变量")

    return create_config_from_dict(raw_data)
