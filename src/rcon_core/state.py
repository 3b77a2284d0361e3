# File: src/rcon_core/state.py
"""
RCON 核心库 - 状态模块

负责定义和存储所有易变的会话状态。
本模块不包含业务逻辑，仅作为数据容器供 Session 读写。
"""

from dataclasses import dataclass
from enum import Enum, auto


class SessionStatus(Enum):
    """会话的生命周期状态枚举。

    状态流转示意:
    DISCONNECTED -> CONNECTED -> AUTHENTICATED
          |             |              |
          v             v              v
        CLOSED        CLOSED         CLOSED
    """

    DISCONNECTED = auto()
    """初始状态，会话已实例化但尚未建立连接。"""

    CONNECTED = auto()
    """TCP 连接已建立，尚未通过认证。"""

    AUTHENTICATED = auto()
    """认证成功，可以执行命令。"""

    CLOSED = auto()
    """连接已释放，会话不可再用。"""


@dataclass
class RconState:
    """存储 RCON 会话的易变状态数据。

    Attributes:
        last_correlation_id: 最近一次发出的关联 ID。从 0 开始，每次发包前自增，
            永不重置、永不复用。
        status: 当前会话的运行状态。
        last_error: 最近一次发生的错误信息描述，用于 UI 显示。
    """

    last_correlation_id: int = 0
    status: SessionStatus = SessionStatus.DISCONNECTED
    last_error: str = ""

    @property
    def is_connected(self) -> bool:
        """连接是否可用 (已连接或已认证)。"""
        return self.status in (SessionStatus.CONNECTED, SessionStatus.AUTHENTICATED)

    @property
    def is_authenticated(self) -> bool:
        return self.status == SessionStatus.AUTHENTICATED
