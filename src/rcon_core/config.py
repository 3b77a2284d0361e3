"""
RCON 核心库 - 配置模块

负责配置的加载、解析与强类型转换。
支持从 TOML 文件、环境变量或字典中加载配置。
"""

import codecs
import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_PORT = 27015
DEFAULT_TIMEOUT = 5.0


@dataclass(frozen=True)
class RconConfig:
    """RconSession 的强类型配置对象。

    所有字段均为只读 (frozen=True)，确保配置在运行时不可变。

    Attributes:
        server_address: 游戏服务器地址 (IP 或域名)。
        server_port: RCON 端口 (通常为 27015)。
        password: RCON 密码。authenticate() 未显式传入密码时使用。
        timeout: 建立连接的超时时间 (秒)。
        io_timeout: 单次读写的超时时间 (秒)。None 表示不限制。
        encoding: 命令与响应文本使用的字符编码。
    """

    server_address: str
    server_port: int = DEFAULT_PORT
    password: str = ""
    timeout: float = DEFAULT_TIMEOUT
    io_timeout: float | None = None
    encoding: str = "utf-8"

    @property
    def endpoint(self) -> str:
        return f"{self.server_address}:{self.server_port}"

    def __repr__(self) -> str:
        """
        覆盖默认的 repr，隐藏密码字段，防止日志泄露敏感信息。
        """
        return (
            f"<{self.__class__.__name__} "
            f"server={self.endpoint}, "
            f"password='******', "
            f"timeout={self.timeout}, "
            f"io_timeout={self.io_timeout}>"
        )


def create_config_from_dict(raw_data: dict[str, Any]) -> RconConfig:
    """通用工厂：将字典转换为强类型配置对象。

    负责字段的清洗、默认值注入和类型转换。

    Args:
        raw_data: 原始配置字典 (来自 TOML 或 Env)。

    Returns:
        RconConfig: 验证并转换后的配置对象。

    Raises:
        ConfigError: 当必要字段缺失或格式错误时抛出。
    """
    try:
        # --- 内部辅助函数 ---
        def _req(key: str) -> Any:
            """获取必要字段，缺失则报错"""
            if key not in raw_data or raw_data[key] in (None, ""):
                raise ConfigError(f"配置缺失: 缺少必要字段 '{key}'")
            return raw_data[key]

        def _to_port(val: Any) -> int:
            try:
                port = int(val)
            except (TypeError, ValueError):
                raise ConfigError(f"端口格式无效: {val}")
            if not 0 < port < 65536:
                raise ConfigError(f"端口超出范围 (1-65535): {port}")
            return port

        def _to_timeout(key: str, default: float | None) -> float | None:
            val = raw_data.get(key, default)
            if val is None or val == "":
                return default
            try:
                seconds = float(val)
            except (TypeError, ValueError):
                raise ConfigError(f"超时格式无效 '{key}': {val}")
            if seconds <= 0:
                raise ConfigError(f"超时必须为正数 '{key}': {val}")
            return seconds

        def _to_encoding(val: Any) -> str:
            try:
                return codecs.lookup(str(val)).name
            except LookupError:
                raise ConfigError(f"未知的字符编码: {val}")

        # 支持 "host:port" 的简写形式
        address = str(_req("server_ip")).strip()
        port_val = raw_data.get("port", DEFAULT_PORT)
        if "port" not in raw_data and address.count(":") == 1:
            address, port_val = address.split(":")

        return RconConfig(
            server_address=address,
            server_port=_to_port(port_val),
            password=str(raw_data.get("password", "")),
            timeout=_to_timeout("timeout", DEFAULT_TIMEOUT),
            io_timeout=_to_timeout("io_timeout", None),
            encoding=_to_encoding(raw_data.get("encoding", "utf-8")),
        )

    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"配置生成失败: {e}") from e


def load_config_from_toml(file_path: Path, profile: str = "default") -> RconConfig:
    """从 TOML 文件加载配置。

    支持多层级查找策略:
    1. [profile.xxx]: 优先查找指定的 profile 块。
    2. [rcon]: 单服务器配置块。
    3. Root: 兼容根目录直接配置。

    Args:
        file_path: TOML 文件路径。
        profile: 配置预设名。默认为 "default"。

    Returns:
        RconConfig: 配置对象。

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

    raw_config = {}

    if "profile" in data:
        if profile not in data["profile"]:
            raise ConfigError(f"未找到预设: [profile.{profile}]")
        raw_config = data["profile"][profile]
    elif "rcon" in data:
        if profile != "default":
            logger.warning(f"配置仅包含 [rcon] 节，忽略 profile='{profile}'。")
        raw_config = data["rcon"]
    else:
        raw_config = data

    return create_config_from_dict(raw_config)


def load_config_from_env() -> RconConfig:
    """从环境变量加载配置 (Docker/Cloud Friendly)。

    自动读取所有以 `RCON_` 开头的相关环境变量，并映射到配置字段。
    例如: `RCON_PASSWORD` -> `password`。

    Returns:
        RconConfig: 配置对象。

    Raises:
        ConfigError: 未检测到任何相关环境变量。
    """
    env_map = {
        "server_ip": "SERVER_IP",
        "port": "PORT",
        "password": "PASSWORD",
        "timeout": "TIMEOUT",
        "io_timeout": "IO_TIMEOUT",
        "encoding": "ENCODING",
    }

    raw_data = {}

    for cfg_key, env_suffix in env_map.items():
        val = os.environ.get(f"RCON_{env_suffix}")
        if val is not None:
            raw_data[cfg_key] = val

    if not raw_data:
        raise ConfigError("未检测到 RCON_ 前缀的环境变量")

    return create_config_from_dict(raw_data)
