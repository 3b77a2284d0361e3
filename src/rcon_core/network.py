# src/rcon_core/network.py
"""
RCON 核心库 - 网络模块 (Network) [Asyncio Edition]

封装 TCP 连接的建立、发送、精确读取和关闭。
该模块屏蔽了底层 Stream 的复杂性，向会话层提供纯粹的 bytes 收发接口。
"""

import asyncio
import logging
from typing import Optional

from .config import RconConfig
from .exceptions import ConnectError, NetworkError, ReadError, ShortRead, WriteError

logger = logging.getLogger(__name__)


class TcpClient:
    """
    封装 asyncio TCP 流操作的客户端。

    连接超时使用 config.timeout；单次读写超时使用 config.io_timeout (None 表示不限制)。
    """

    def __init__(self, config: RconConfig):
        self.config = config
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None

    @property
    def is_connected(self) -> bool:
        return self.writer is not None and not self.writer.is_closing()

    async def connect(self) -> None:
        """
        建立 TCP 连接。
        """
        target = (self.config.server_address, self.config.server_port)
        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(*target), timeout=self.config.timeout
            )
            logger.debug(f"TCP 连接已建立: {self.config.endpoint}")

        except asyncio.TimeoutError:
            await self.close()
            raise ConnectError(
                f"连接超时 {self.config.endpoint} ({self.config.timeout}s)"
            ) from None
        except Exception as e:
            await self.close()
            raise ConnectError(f"连接失败 {self.config.endpoint}: {e}") from e

    async def send(self, data: bytes) -> None:
        """
        发送数据并等待写缓冲区排空。
        """
        if not self.writer or self.writer.is_closing():
            raise WriteError("连接未建立或已关闭")

        try:
            self.writer.write(data)
            await asyncio.wait_for(self.writer.drain(), timeout=self.config.io_timeout)
        except asyncio.TimeoutError:
            raise WriteError(f"发送超时 ({self.config.io_timeout}s)") from None
        except Exception as e:
            raise WriteError(f"发送失败: {e}") from e

    async def receive_exactly(self, n: int) -> bytes:
        """
        精确读取 n 个字节。

        Raises:
            ShortRead: 对端在读满 n 字节前关闭了连接。
            ReadError: 读取超时或其他 I/O 错误。
        """
        if not self.reader:
            raise ReadError("连接未建立")

        try:
            return await asyncio.wait_for(
                self.reader.readexactly(n), timeout=self.config.io_timeout
            )
        except asyncio.IncompleteReadError as e:
            raise ShortRead(n, len(e.partial)) from e
        except asyncio.TimeoutError:
            raise ReadError(f"接收超时 ({self.config.io_timeout}s)") from None
        except NetworkError:
            raise
        except Exception as e:
            raise ReadError(f"接收错误: {e}") from e

    async def close(self) -> None:
        """关闭连接"""
        writer, self.writer, self.reader = self.writer, None, None
        if writer is None:
            return

        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            # 对端已重置连接，本地资源已释放
            logger.debug(f"关闭连接时出现异常: {e}")
        logger.debug("TCP 连接已关闭")

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
