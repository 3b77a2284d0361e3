# tests/conftest.py
import struct
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# 确保 src 目录在 sys.path 中
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from rcon_core.config import RconConfig
from rcon_core.exceptions import ShortRead
from rcon_core.network import TcpClient


def make_frame(correlation_id: int, packet_type: int, body: bytes = b"") -> bytes:
    """辅助函数：按线上格式手工拼一个完整帧 (含 size 前缀与结束符)。"""
    return (
        struct.pack("<iii", len(body) + 10, correlation_id, packet_type)
        + body
        + b"\x00\x00"
    )


def feed_stream(net_client: MagicMock, data: bytes) -> None:
    """让 mock 的 receive_exactly 从一段字节流中按需读取。"""
    buf = bytearray(data)

    async def _receive_exactly(n: int) -> bytes:
        if len(buf) < n:
            partial = len(buf)
            buf.clear()
            raise ShortRead(n, partial)
        chunk = bytes(buf[:n])
        del buf[:n]
        return chunk

    net_client.receive_exactly.side_effect = _receive_exactly


@pytest.fixture
def valid_config():
    """
    [Fixture] 返回一个指向本地的 RconConfig 对象。
    """
    return RconConfig(
        server_address="127.0.0.1",
        server_port=27015,
        password="secret",
        timeout=2.0,
        io_timeout=None,
        encoding="utf-8",
    )


@pytest.fixture
def mock_net_client():
    """
    模拟 TcpClient。使用 spec 确保只模拟真实存在的方法。
    """
    net = MagicMock(spec=TcpClient)
    net.connect = AsyncMock()
    net.send = AsyncMock()
    net.receive_exactly = AsyncMock()
    net.close = AsyncMock()
    return net
