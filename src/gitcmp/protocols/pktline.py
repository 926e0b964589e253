# src/gitcmp/protocols/pktline.py
"""
pkt-line 分帧器 (Frame Reader)

将原始字节流解码为惰性的帧序列。每一帧以 4 个十六进制字符的长度字段开头，
长度包含字段自身；"0000" 是 flush-pkt，不携带负载。

本模块是无状态的 (Stateless)，不做任何网络 I/O，只从已缓冲的字节源中读取。
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import BinaryIO

from ..exceptions import MalformedLength, TruncatedStream
from .constants import HEX_DIGITS_ANY_CASE, PktLine

logger = logging.getLogger(__name__)

FLUSH_PKT = PktLine.FLUSH


@dataclass(frozen=True)
class Data:
    """数据帧，负载长度为 0-65516 字节。"""

    payload: bytes


@dataclass(frozen=True)
class Flush:
    """flush-pkt，标记协议中的分段边界。"""


Frame = Data | Flush

# 共享实例，Flush 没有任何字段
FLUSH = Flush()


def _read_exact(reader: BinaryIO, n: int) -> bytes:
    """尽量读满 n 字节，字节源耗尽时返回实际读到的部分。"""
    chunks = []
    remaining = n
    while remaining > 0:
        chunk = reader.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def parse_pkt_len(field: bytes) -> int:
    """解析 4 字节长度字段 (不处理 flush 哨兵)。

    Args:
        field: 长度字段原始字节。

    Returns:
        int: 帧总长度 (含 4 字节帧头)。

    Raises:
        MalformedLength: 字段不是 4 位十六进制，或数值超出 [4, 65520]。
    """
    if len(field) != PktLine.HEADER_LEN or any(
        b not in HEX_DIGITS_ANY_CASE for b in field
    ):
        raise MalformedLength(field, "not a hex length")

    n = int(field, 16)
    if n < PktLine.MIN_LEN or n > PktLine.MAX_LEN:
        raise MalformedLength(field, f"{n} out of range")
    return n


def read_pkt_line(reader: BinaryIO) -> Frame | None:
    """从字节源中读取下一帧。

    Args:
        reader: 任何提供 read(n) 的二进制字节源 (如 io.BytesIO)。

    Returns:
        Frame | None: 数据帧或 FLUSH；恰好在帧边界处耗尽时返回 None。

    Raises:
        MalformedLength: 长度字段非法。
        TruncatedStream: 帧头或负载不完整。
    """
    field = _read_exact(reader, PktLine.HEADER_LEN)
    if not field:
        return None
    if len(field) < PktLine.HEADER_LEN:
        raise TruncatedStream(PktLine.HEADER_LEN, len(field), what="length")

    if field == PktLine.FLUSH:
        return FLUSH

    n = parse_pkt_len(field)
    size = n - PktLine.HEADER_LEN
    payload = _read_exact(reader, size)
    if len(payload) < size:
        raise TruncatedStream(size, len(payload))
    return Data(payload)


def iter_pkt_lines(reader: BinaryIO) -> Iterator[Frame]:
    """惰性地遍历字节源中的所有帧。

    序列只能向前，一个字节源只能遍历一次。
    """
    while True:
        frame = read_pkt_line(reader)
        if frame is None:
            return
        yield frame


def encode_pkt_line(payload: bytes) -> bytes:
    """将负载编码为一个数据帧。

    Raises:
        ValueError: 负载超过 65516 字节。
    """
    if len(payload) > PktLine.MAX_PAYLOAD:
        raise ValueError(f"pkt-line payload too long: {len(payload)} bytes")
    return f"{len(payload) + PktLine.HEADER_LEN:04x}".encode("ascii") + payload
