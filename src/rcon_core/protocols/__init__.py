# src/rcon_core/protocols/__init__.py
"""
RCON 协议层 (Protocol Layer)

本包负责协议数据包的纯粹构建 (Build) 与解析 (Parse)。

- 不包含任何 socket 操作或网络 I/O。
- 不包含任何状态管理 (State)。
- 不依赖于 core 或 network 层。
"""

from . import constants
from .constants import PacketType
from .packets import (
    Packet,
    build_packet,
    decode_packet,
    encode_packet,
    parse_frame,
    parse_size,
)

# 公共 API
__all__ = [
    "constants",
    "PacketType",
    "Packet",
    "build_packet",
    "encode_packet",
    "decode_packet",
    "parse_size",
    "parse_frame",
]
