# File: src/rcon_core/core.py
"""
RCON 会话引擎 (Session Engine)

职责：
1. 资源组装：State + Network + Config。
2. 握手与命令：Authenticate -> ExecuteCommand，每次都是一发一收。
3. 生命周期：Connect -> Authenticate -> Close。

连接是严格顺序的：一次写入之后紧跟且仅跟一次读取，中间不允许插入其他操作。
需要并发执行命令的调用方必须在外部自行串行化 (例如每个并发用户一个会话)。
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any, NoReturn

from .config import RconConfig
from .exceptions import (
    AuthFailed,
    CorrelationMismatch,
    NotAuthenticated,
    ProtocolMismatch,
    RconError,
    StateError,
)
from .network import TcpClient
from .protocols import constants, packets
from .protocols.constants import PacketType
from .protocols.packets import Packet
from .state import RconState, SessionStatus

logger = logging.getLogger(__name__)

# 定义回调函数类型别名：支持同步或异步函数
StatusCallback = Callable[[SessionStatus, str], Any | Awaitable[Any]]


class RconSession:
    """RCON 会话引擎 (Async)。"""

    def __init__(
        self,
        config: RconConfig,
        status_callback: StatusCallback | None = None,
    ) -> None:
        """初始化会话。

        构造时不建立连接，必须先调用 connect()。

        Args:
            config: 全局配置对象。
            status_callback: 初始状态回调。也可以通过 add_listener 注册。
        """
        self.config = config

        self._listeners: list[StatusCallback] = []
        self._listener_tasks: set[asyncio.Task] = set()
        if status_callback:
            self.add_listener(status_callback)

        self._state = RconState()
        self.net_client = TcpClient(config)

    @property
    def state(self) -> RconState:
        """获取当前会话状态的只读副本。

        返回的是一个副本 (Copy)，修改它不会影响会话内部状态。
        """
        return replace(self._state)

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    def add_listener(self, callback: StatusCallback) -> None:
        """注册状态变更监听器。"""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: StatusCallback) -> None:
        """移除状态变更监听器。"""
        if callback in self._listeners:
            self._listeners.remove(callback)

    async def connect(self) -> None:
        """建立到服务器的 TCP 连接。

        Raises:
            ConnectError: 传输层连接失败，状态保持 DISCONNECTED。
            StateError: 会话已关闭。
        """
        if self._state.status == SessionStatus.CLOSED:
            raise StateError("会话已关闭，不可重用")
        if self._state.is_connected:
            logger.warning("当前已连接，跳过连接")
            return

        try:
            await self.net_client.connect()
        except RconError as e:
            self._state.last_error = str(e)
            raise

        self._update_status(SessionStatus.CONNECTED, f"已连接 {self.config.endpoint}")

    async def authenticate(self, password: str | None = None) -> bool:
        """执行认证握手。

        Args:
            password: RCON 密码。为 None 时使用 config.password。

        Returns:
            bool: 认证成功返回 True。服务器返回低于 -1 的关联 ID 时，
                既不算成功也不算失败，状态保持不变并返回 False。

        Raises:
            StateError: 会话不处于 CONNECTED 状态。
            AuthFailed: 密码被拒绝，会话仍可重试认证。
            ProtocolMismatch: 响应类型不是认证响应。
            NetworkError: 读写失败。
            ProtocolError: 响应帧格式错误。
        """
        if self._state.status != SessionStatus.CONNECTED:
            raise StateError(f"当前状态不允许认证: {self._state.status.name}")

        if password is None:
            password = self.config.password

        response = await self._exchange(PacketType.AUTH, password)

        if response.type != PacketType.AUTH_RESPONSE:
            self._fail(ProtocolMismatch(int(PacketType.AUTH_RESPONSE), response.type))

        if response.correlation_id == constants.AUTH_FAILED_ID:
            self._fail(AuthFailed())

        if response.correlation_id > constants.AUTH_FAILED_ID:
            self._update_status(SessionStatus.AUTHENTICATED, "认证成功")
            return True

        logger.warning(
            f"认证响应 ID 异常 ({response.correlation_id})，状态保持不变"
        )
        return False

    async def execute_command(self, command: bytes | str) -> str:
        """执行一条命令并返回文本结果。

        Args:
            command: 命令内容。str 按 config.encoding 编码。

        Returns:
            str: 响应包体，按 config.encoding 解码。

        Raises:
            NotAuthenticated: 尚未认证 (不会触碰连接)。
            CorrelationMismatch: 响应 ID 与请求 ID 不一致。
            NetworkError: 读写失败。
            ProtocolError: 响应帧格式错误。
        """
        body = await self.execute_command_raw(command)
        return body.decode(self.config.encoding, errors="replace")

    async def execute_command_raw(self, command: bytes | str) -> bytes:
        """执行一条命令并返回原始响应包体。"""
        if not self._state.is_authenticated:
            raise NotAuthenticated()

        response = await self._exchange(PacketType.EXEC_COMMAND, command)
        sent_id = self._state.last_correlation_id
        if response.correlation_id != sent_id:
            self._fail(CorrelationMismatch(sent_id, response.correlation_id))

        return response.body

    async def close(self) -> None:
        """释放连接。关闭后会话不可再用。"""
        if self._state.status == SessionStatus.CLOSED:
            return

        await self.net_client.close()
        self._update_status(SessionStatus.CLOSED, "连接已关闭")

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # =========================================================================
    # 内部实现
    # =========================================================================

    def _next_correlation_id(self) -> int:
        """关联 ID 自增。ID 永不重置、永不复用。"""
        if self._state.last_correlation_id >= constants.INT32_MAX:
            raise StateError("关联 ID 已耗尽，请重新建立会话")
        self._state.last_correlation_id += 1
        return self._state.last_correlation_id

    async def _exchange(self, packet_type: PacketType, body: bytes | str) -> Packet:
        """发送一个请求包并读取一个响应包。"""
        packet = packets.build_packet(
            packet_type, self._next_correlation_id(), body, self.config.encoding
        )
        try:
            data = packets.encode_packet(packet)
            await self.net_client.send(data)
            logger.debug(f"已发送: id={packet.correlation_id} type={packet.type}")

            response = await self._read_packet()
        except RconError as e:
            self._state.last_error = str(e)
            raise

        logger.debug(f"已接收: {response!r}")
        return response

    async def _read_packet(self) -> Packet:
        # 先读取并校验 size，限定后续读取的字节数
        size = packets.parse_size(
            await self.net_client.receive_exactly(constants.SIZE_FIELD_LEN)
        )
        data = await self.net_client.receive_exactly(size)
        return packets.parse_frame(size, data)

    def _fail(self, error: RconError) -> NoReturn:
        self._state.last_error = str(error)
        raise error

    def _update_status(self, status: SessionStatus, msg: str) -> None:
        """更新内部状态并异步触发所有回调。"""
        self._state.status = status
        logger.info(f"[{status.name}] {msg}")

        if not self._listeners:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("事件循环未运行，跳过状态回调")
            return

        for callback in self._listeners:
            if inspect.iscoroutinefunction(callback):
                # 持有任务引用，防止被 GC 提前回收
                task = loop.create_task(callback(status, msg))
                self._listener_tasks.add(task)
                task.add_done_callback(self._on_listener_done)
            else:
                loop.call_soon(callback, status, msg)

    def _on_listener_done(self, task: asyncio.Task) -> None:
        self._listener_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"状态监听器执行异常: {exc!r}", exc_info=exc)
