# src/gitcmp/protocols/__init__.py
"""
gitcmp 协议层 (Protocol Layer)

本包负责 pkt-line 分帧与 ref 广告的纯粹解析 (Parse)。

- 不包含任何 socket/HTTP 操作或网络 I/O。
- 不包含任何状态管理。
- 不依赖于 core、fetcher 或 network 层。
"""

from . import constants
from .advertisement import (
    RefLine,
    RefSet,
    check_delimiter,
    check_hash,
    check_signature,
    check_trailing_newline,
    parse_advertisement,
    parse_ref_line,
    scan_ref_name,
    split_capabilities,
)
from .pktline import (
    FLUSH,
    FLUSH_PKT,
    Data,
    Flush,
    Frame,
    encode_pkt_line,
    iter_pkt_lines,
    parse_pkt_len,
    read_pkt_line,
)

# 公共 API
__all__ = [
    "constants",
    "Data",
    "Flush",
    "Frame",
    "FLUSH",
    "FLUSH_PKT",
    "read_pkt_line",
    "iter_pkt_lines",
    "parse_pkt_len",
    "encode_pkt_line",
    "RefLine",
    "RefSet",
    "check_hash",
    "check_delimiter",
    "scan_ref_name",
    "split_capabilities",
    "check_trailing_newline",
    "parse_ref_line",
    "check_signature",
    "parse_advertisement",
]
