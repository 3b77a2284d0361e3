# File: src/rcon_core/protocols/packets.py
"""
RCON 封包编解码器 (Packet Codec)

负责 Packet 与二进制帧之间的相互转换。
本模块是无状态的 (Stateless)，不持有任何连接或会话信息，也不执行任何 I/O。

帧结构 (小端序):
    size(4) + correlation_id(4) + type(4) + body(size-10) + b"\\x00\\x00"
"""

import logging
import struct
from dataclasses import dataclass

from ..exceptions import (
    FrameTooLarge,
    FrameTooSmall,
    MalformedTrailer,
    ProtocolError,
    ShortRead,
)
from . import constants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Packet:
    """RCON 数据包。

    Attributes:
        size: size 字段之后的字节数 (关联 ID + 类型 + 包体 + 结束符)。
        correlation_id: 关联 ID，服务器会在响应中原样返回。
        type: 包类型，见 constants.PacketType。未知类型保留原始整数。
        body: 包体，不含 2 字节结束符。
    """

    size: int
    correlation_id: int
    type: int
    body: bytes = b""

    @property
    def text(self) -> str:
        """以 UTF-8 解码包体。"""
        return self.decode_body()

    def decode_body(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding, errors="replace")

    def __repr__(self) -> str:
        return (
            f"<Packet id={self.correlation_id} type={self.type} "
            f"size={self.size} body_len={len(self.body)}>"
        )


def build_packet(
    packet_type: int,
    correlation_id: int,
    body: bytes | str = b"",
    encoding: str = "utf-8",
) -> Packet:
    """构建一个数据包，并根据包体计算 size 字段。

    Args:
        packet_type: 包类型。
        correlation_id: 关联 ID。
        body: 包体。str 会按 encoding 编码。
        encoding: str 包体使用的编码。

    Returns:
        Packet: size == len(body) + 10 的数据包。

    Raises:
        ProtocolError: str 包体无法按 encoding 编码。
    """
    if isinstance(body, str):
        try:
            body = body.encode(encoding)
        except UnicodeEncodeError as e:
            raise ProtocolError(
                f"包体包含 {encoding} 无法编码的字符: {e.object[e.start : e.end]!r}"
            ) from e
    return Packet(
        size=len(body) + constants.MIN_PACKET_SIZE,
        correlation_id=correlation_id,
        type=int(packet_type),
        body=bytes(body),
    )


def encode_packet(packet: Packet) -> bytes:
    """将数据包序列化为完整的二进制帧。

    size 字段直接使用 packet.size，编码器不重新计算。

    Args:
        packet: 待编码的数据包。

    Returns:
        bytes: 完整帧 (含 size 前缀与结束符)。

    Raises:
        FrameTooLarge: 完整帧超过 MAX_PACKET_SIZE。
        ProtocolError: 头部字段超出 int32 范围。
    """
    frame_len = (
        constants.HEADER.size + len(packet.body) + constants.TERMINATOR_LEN
    )
    if frame_len > constants.MAX_PACKET_SIZE:
        raise FrameTooLarge(frame_len, constants.MAX_PACKET_SIZE)

    try:
        header = constants.HEADER.pack(
            packet.size, packet.correlation_id, int(packet.type)
        )
    except struct.error as e:
        raise ProtocolError(f"包头字段超出 int32 范围: {packet!r}") from e

    return header + packet.body + constants.TERMINATOR


def parse_size(data: bytes) -> int:
    """解析 4 字节 size 前缀并校验最小长度。

    必须在读取包体之前调用，用于限定后续读取的字节数。

    Args:
        data: size 字段的原始字节。

    Returns:
        int: size 之后还需读取的字节数。

    Raises:
        ShortRead: 数据不足 4 字节。
        FrameTooSmall: size 小于协议最小值。
    """
    if len(data) < constants.SIZE_FIELD_LEN:
        raise ShortRead(constants.SIZE_FIELD_LEN, len(data))

    (size,) = constants.SIZE_FIELD.unpack_from(data)
    if size < constants.MIN_PACKET_SIZE:
        raise FrameTooSmall(size, constants.MIN_PACKET_SIZE)
    return size


def parse_frame(size: int, data: bytes) -> Packet:
    """解析 size 前缀之后的帧内容。

    Args:
        size: 已通过 parse_size 校验的 size 值。
        data: size 前缀之后读取到的字节。

    Returns:
        Packet: 去除结束符后的数据包。

    Raises:
        ShortRead: 数据不足以容纳关联 ID 与类型字段。
        MalformedTrailer: 剩余字节不足以容纳 2 字节结束符。
    """
    fixed_len = constants.ID_FIELD_LEN + constants.TYPE_FIELD_LEN
    if len(data) < fixed_len:
        raise ShortRead(fixed_len, len(data))

    correlation_id, packet_type = constants.ID_TYPE_FIELDS.unpack_from(data)

    tail = data[fixed_len:]
    if len(tail) < constants.TERMINATOR_LEN:
        raise MalformedTrailer(len(tail))

    packet = Packet(
        size=size,
        correlation_id=correlation_id,
        type=packet_type,
        body=bytes(tail[: -constants.TERMINATOR_LEN]),
    )
    logger.debug("parse_frame: %r", packet)
    return packet


def decode_packet(buffer: bytes) -> Packet:
    """从字节缓冲区中解码一个完整的帧 (含 size 前缀)。

    缓冲区中超出 size 声明的多余字节会被忽略。

    Raises:
        ShortRead: 缓冲区短于 size 声明的长度。
        FrameTooSmall: size 小于协议最小值。
        MalformedTrailer: 包体不足以容纳结束符。
    """
    size = parse_size(buffer[: constants.SIZE_FIELD_LEN])

    end = constants.SIZE_FIELD_LEN + size
    if len(buffer) < end:
        raise ShortRead(size, len(buffer) - constants.SIZE_FIELD_LEN)

    return parse_frame(size, buffer[constants.SIZE_FIELD_LEN : end])
