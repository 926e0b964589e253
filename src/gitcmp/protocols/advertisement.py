# src/gitcmp/protocols/advertisement.py
"""
Ref 广告解析器 (Advertisement Parser)

解析 `info/refs?service=git-upload-pack` 的响应体，得到 ref 名 -> 哈希 的映射。
这是一个不完整的 Smart Server Response 解析器：只处理 ref 广告阶段，
能力列表 (capabilities) 只做语法识别，不做解释。

Ref 行语法:
    <40 位小写十六进制> SP <可打印字符的 ref 名> [NUL <capabilities>] LF
"""

import io
import logging
from dataclasses import dataclass

from ..exceptions import BadPktLine, FrameError, MalformedRefLine, ProtocolMismatch
from .constants import HEX_DIGITS, Advertisement
from .pktline import Data, iter_pkt_lines

logger = logging.getLogger(__name__)

RefSet = dict[str, str]


@dataclass(frozen=True)
class RefLine:
    """一行 ref 广告的分词结果。

    Attributes:
        hash: 40 位小写十六进制哈希。
        name: ref 名 (如 refs/heads/master)。
        capabilities: NUL 之后的原始能力列表，没有则为 None。
    """

    hash: str
    name: str
    capabilities: bytes | None = None


# =========================================================================
# 分词器 (Tokenizer)
# =========================================================================


def check_hash(data: bytes) -> str:
    """校验行首的固定宽度哈希字段。"""
    field = data[: Advertisement.HASH_LEN]
    if len(field) != Advertisement.HASH_LEN:
        raise MalformedRefLine(data, "hash too short")
    if any(b not in HEX_DIGITS for b in field):
        raise MalformedRefLine(data, "hash is not lowercase hex")
    return field.decode("ascii")


def check_delimiter(data: bytes, offset: int) -> int:
    """校验哈希与 ref 名之间的单个空格，返回其后的偏移量。"""
    if offset >= len(data) or data[offset] != Advertisement.DELIMITER:
        raise MalformedRefLine(data, "missing space after hash")
    return offset + 1


def _is_printable(b: int) -> bool:
    return Advertisement.PRINTABLE_MIN <= b <= Advertisement.PRINTABLE_MAX


def scan_ref_name(data: bytes, offset: int) -> tuple[str, int]:
    """扫描 ref 名，遇到 NUL 或换行停止。

    Returns:
        tuple[str, int]: (ref 名, 结束偏移量)。
    """
    end = offset
    while end < len(data) and _is_printable(data[end]):
        end += 1

    if end == offset:
        raise MalformedRefLine(data, "empty ref name")
    if end < len(data) and data[end] not in (
        Advertisement.CAPABILITIES_MARK,
        Advertisement.NEWLINE,
    ):
        raise MalformedRefLine(data, f"non-printable byte 0x{data[end]:02x} in ref name")
    return data[offset:end].decode("ascii"), end


def split_capabilities(data: bytes, offset: int) -> tuple[bytes | None, int]:
    """识别可选的 NUL + 能力列表后缀 (一直到行尾换行之前)。

    Returns:
        tuple[bytes | None, int]: (能力列表原始字节或 None, 结束偏移量)。
    """
    if offset >= len(data) or data[offset] != Advertisement.CAPABILITIES_MARK:
        return None, offset

    start = offset + 1
    end = data.find(b"\n", start)
    if end == -1:
        end = len(data)
    return data[start:end], end


def check_trailing_newline(data: bytes, offset: int) -> None:
    """校验偏移量处恰好是最后一个字节，且为换行。"""
    if offset >= len(data) or data[offset] != Advertisement.NEWLINE:
        raise MalformedRefLine(data, "missing trailing newline")
    if offset != len(data) - 1:
        raise MalformedRefLine(data, "trailing bytes after newline")


def parse_ref_line(payload: bytes) -> RefLine:
    """将一个数据帧的负载解析为 RefLine。

    Raises:
        MalformedRefLine: 负载不符合 ref 行语法。
    """
    hash_ = check_hash(payload)
    offset = check_delimiter(payload, Advertisement.HASH_LEN)
    name, offset = scan_ref_name(payload, offset)
    capabilities, offset = split_capabilities(payload, offset)
    check_trailing_newline(payload, offset)
    return RefLine(hash=hash_, name=name, capabilities=capabilities)


# =========================================================================
# 解析入口
# =========================================================================


def check_signature(body: bytes) -> None:
    """握手特征校验: 前 5 字节必须是 4 位小写十六进制 + '#'。

    Raises:
        ProtocolMismatch: 服务器没有说我们期望的协议。
    """
    head = body[: Advertisement.SIGNATURE_LEN]
    if (
        len(head) != Advertisement.SIGNATURE_LEN
        or any(b not in HEX_DIGITS for b in head[:4])
        or head[4] != Advertisement.SIGNATURE_MARK
    ):
        raise ProtocolMismatch(head)


def parse_advertisement(body: bytes) -> RefSet:
    """解析完整的 ref 广告响应体。

    Args:
        body: 完整的 HTTP 响应体。

    Returns:
        RefSet: ref 名 -> 哈希。同名 ref 出现多次时，后出现的覆盖先出现的。

    Raises:
        ProtocolMismatch: 握手特征不匹配。
        MalformedRefLine: 某个数据帧不符合 ref 行语法。
        BadPktLine: 底层分帧失败 (原始 FrameError 链接为 __cause__)。
    """
    check_signature(body)

    refs: RefSet = {}
    index = 0
    try:
        for frame in iter_pkt_lines(io.BytesIO(body)):
            if not isinstance(frame, Data):
                continue

            index += 1
            if frame.payload == Advertisement.SERVICE_ANNOUNCEMENT:
                if index > 1:
                    logger.warning(f"服务声明出现在第 {index} 个数据帧，已跳过")
                continue

            ref = parse_ref_line(frame.payload)
            if ref.name in refs:
                logger.debug(f"重复的 ref {ref.name}，覆盖为 {ref.hash}")
            refs[ref.name] = ref.hash
    except FrameError as e:
        raise BadPktLine(e) from e

    logger.debug(f"解析完成，共 {len(refs)} 个 ref")
    return refs
