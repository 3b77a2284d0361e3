# src/rcon_core/__init__.py
"""
RCON-Core v1.0.0
现代化的 Source RCON 远程管理协议客户端核心库。
"""

# 暴露核心配置
from .config import (
    RconConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)

# 暴露会话与状态
from .core import RconSession

# 暴露异常体系 (方便上层 try-except)
from .exceptions import (
    AuthError,
    AuthFailed,
    ConfigError,
    ConnectError,
    CorrelationMismatch,
    FrameTooLarge,
    FrameTooSmall,
    MalformedTrailer,
    NetworkError,
    NotAuthenticated,
    ProtocolError,
    ProtocolMismatch,
    RconError,
    ReadError,
    ShortRead,
    StateError,
    WriteError,
)
from .state import RconState, SessionStatus

__version__ = "1.0.0"

__all__ = [
    "RconSession",
    "RconConfig",
    "RconState",
    "SessionStatus",
    "create_config_from_dict",
    "load_config_from_env",
    "load_config_from_toml",
    "RconError",
    "ConfigError",
    "NetworkError",
    "ConnectError",
    "WriteError",
    "ReadError",
    "ShortRead",
    "ProtocolError",
    "FrameTooSmall",
    "FrameTooLarge",
    "MalformedTrailer",
    "ProtocolMismatch",
    "CorrelationMismatch",
    "AuthError",
    "AuthFailed",
    "StateError",
    "NotAuthenticated",
]
