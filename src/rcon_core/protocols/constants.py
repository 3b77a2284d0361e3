# src/rcon_core/protocols/constants.py
"""
RCON 协议常量表 (Constants)

仅定义协议的结构性常量（字段长度、包长限制、包类型）。
所有整数字段均为小端序有符号 32 位。
"""

import struct
from enum import IntEnum

# =========================================================================
# 包结构 (Structure)
# =========================================================================
SIZE_FIELD_LEN = 4  # size 字段本身的长度 (size 的值不包含它自己)
ID_FIELD_LEN = 4  # 关联 ID
TYPE_FIELD_LEN = 4  # 包类型
TERMINATOR = b"\x00\x00"  # 包体结束符 + 包尾
TERMINATOR_LEN = len(TERMINATOR)

MIN_PACKET_SIZE = ID_FIELD_LEN + TYPE_FIELD_LEN + TERMINATOR_LEN  # 10
MAX_PACKET_SIZE = 4096  # 完整帧 (含 size 字段) 的最大长度
MAX_BODY_LEN = MAX_PACKET_SIZE - SIZE_FIELD_LEN - MIN_PACKET_SIZE  # 4082

HEADER = struct.Struct("<iii")  # size, correlation_id, type
SIZE_FIELD = struct.Struct("<i")
ID_TYPE_FIELDS = struct.Struct("<ii")

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# 服务器以该关联 ID 回复认证请求表示密码错误
AUTH_FAILED_ID = -1


# =========================================================================
# 包类型 (Packet Types)
# =========================================================================
class PacketType(IntEnum):
    """包头部的 type 字段定义"""

    RESPONSE_VALUE = 0  # 命令响应 (Server -> Client)
    EXEC_COMMAND = 2  # 执行命令 (Client -> Server)
    AUTH_RESPONSE = 2  # 认证响应 (Server -> Client)，与 EXEC_COMMAND 同值
    AUTH = 3  # 认证请求 (Client -> Server)
