# tests/test_advertisement.py
"""
测试 ref 广告解析器与 ref 行分词器。
覆盖 src/gitcmp/protocols/advertisement.py
"""

import pytest

from gitcmp.exceptions import (
    BadPktLine,
    MalformedLength,
    MalformedRefLine,
    ProtocolMismatch,
    TruncatedStream,
)
from gitcmp.protocols import advertisement
from gitcmp.protocols.advertisement import RefLine, parse_advertisement, parse_ref_line
from gitcmp.protocols.pktline import FLUSH_PKT, encode_pkt_line

HASH_A = "95dcfa3633004da0049d3d0fa03f80589cbcaf31"
HASH_B = "d049f6c27a2244e12041955e262a404c7faba355"
ANNOUNCEMENT = encode_pkt_line(b"# service=git-upload-pack\n")


def _ref(hash_: str, name: str, caps: bytes | None = None) -> bytes:
    """辅助函数：构造一个 ref 行数据帧"""
    line = f"{hash_} {name}".encode()
    if caps is not None:
        line += b"\x00" + caps
    return encode_pkt_line(line + b"\n")


# --- 整体解析 ---


def test_parse_sample_response(sample_body, sample_refs):
    """服务声明被跳过，能力列表被丢弃，四个 ref 全部解析出来"""
    refs = parse_advertisement(sample_body)
    assert refs == sample_refs
    assert "# service=git-upload-pack" not in refs


def test_parse_with_flush_packets():
    """真实服务器在服务声明后和末尾各发一个 flush-pkt"""
    body = (
        ANNOUNCEMENT
        + FLUSH_PKT
        + _ref(HASH_A, "HEAD", b"multi_ack thin-pack side-band symref=HEAD:refs/heads/main")
        + _ref(HASH_A, "refs/heads/main")
        + FLUSH_PKT
    )
    assert parse_advertisement(body) == {"HEAD": HASH_A, "refs/heads/main": HASH_A}


def test_announcement_tolerated_anywhere():
    body = ANNOUNCEMENT + _ref(HASH_A, "refs/heads/main") + ANNOUNCEMENT + FLUSH_PKT
    assert parse_advertisement(body) == {"refs/heads/main": HASH_A}


def test_duplicate_ref_later_wins():
    body = ANNOUNCEMENT + _ref(HASH_A, "refs/heads/main") + _ref(HASH_B, "refs/heads/main")
    assert parse_advertisement(body) == {"refs/heads/main": HASH_B}


def test_empty_advertisement():
    """只有服务声明和 flush 的空仓库"""
    assert parse_advertisement(ANNOUNCEMENT + FLUSH_PKT + FLUSH_PKT) == {}


def test_parse_returns_fresh_mapping(sample_body):
    first = parse_advertisement(sample_body)
    first["refs/heads/extra"] = HASH_A
    assert "refs/heads/extra" not in parse_advertisement(sample_body)


# --- 握手特征 ---


@pytest.mark.parametrize(
    "body, description",
    [
        (b"", "空响应"),
        (b"001e", "不足 5 字节"),
        (b"<html><body>Not a repo</body></html>", "HTML 页面"),
        (b"001E# service=git-upload-pack\n", "大写十六进制"),
        (b"0000" + ANNOUNCEMENT, "以 flush 开头"),
        (_ref(HASH_A, "refs/heads/main"), "没有服务声明"),
    ],
)
def test_protocol_mismatch(body, description):
    with pytest.raises(ProtocolMismatch) as exc_info:
        parse_advertisement(body)
    assert exc_info.value.head == body[:5], description


# --- 错误传播 ---


def test_malformed_ref_line_carries_payload():
    bad = f"{HASH_A.upper()} refs/heads/main\n".encode()
    body = ANNOUNCEMENT + encode_pkt_line(bad)
    with pytest.raises(MalformedRefLine) as exc_info:
        parse_advertisement(body)
    assert exc_info.value.payload == bad


def test_frame_errors_are_wrapped():
    with pytest.raises(BadPktLine) as exc_info:
        parse_advertisement(ANNOUNCEMENT + b"zzzz")
    assert isinstance(exc_info.value.error, MalformedLength)
    assert exc_info.value.__cause__ is exc_info.value.error


def test_truncated_body_is_wrapped():
    body = ANNOUNCEMENT + _ref(HASH_A, "refs/heads/main")[:-5]
    with pytest.raises(BadPktLine) as exc_info:
        parse_advertisement(body)
    assert isinstance(exc_info.value.__cause__, TruncatedStream)


# --- 分词器 ---


@pytest.mark.parametrize(
    "payload, expected, description",
    [
        (
            f"{HASH_A} refs/heads/master\n".encode(),
            RefLine(HASH_A, "refs/heads/master"),
            "普通 ref",
        ),
        (
            f"{HASH_A} refs/heads/maint\x00multi_ack\n".encode(),
            RefLine(HASH_A, "refs/heads/maint", b"multi_ack"),
            "带能力列表",
        ),
        (
            f"{HASH_A} HEAD\x00\n".encode(),
            RefLine(HASH_A, "HEAD", b""),
            "空能力列表",
        ),
        (
            f"{HASH_A} refs/tags/v1.0^{{}}\n".encode(),
            RefLine(HASH_A, "refs/tags/v1.0^{}"),
            "peeled tag",
        ),
        (
            f"{HASH_A} refs/heads/with space\n".encode(),
            RefLine(HASH_A, "refs/heads/with space"),
            "空格也是可打印字符",
        ),
    ],
)
def test_parse_ref_line(payload, expected, description):
    assert parse_ref_line(payload) == expected, description


@pytest.mark.parametrize(
    "payload, description",
    [
        (b"", "空负载"),
        (f"{HASH_A[:39]} refs/heads/main\n".encode(), "哈希只有 39 位"),
        (f"{HASH_A.upper()} refs/heads/main\n".encode(), "大写哈希"),
        (f"{HASH_A[:39]}g refs/heads/main\n".encode(), "哈希含非十六进制字符"),
        (f"{HASH_A}\trefs/heads/main\n".encode(), "分隔符不是空格"),
        (f"{HASH_A}refs/heads/main\n".encode(), "缺少分隔符"),
        (f"{HASH_A} \n".encode(), "空 ref 名"),
        (f"{HASH_A} refs/heads/ma\tin\n".encode(), "ref 名含制表符"),
        (f"{HASH_A} refs/heads/main".encode(), "缺少结尾换行"),
        (f"{HASH_A} refs/heads/main\n\n".encode(), "换行后还有字节"),
        (f"{HASH_A} refs/heads/main\x00caps\nmore\n".encode(), "能力列表内含换行"),
        (f"{HASH_A} refs/heads/main\x00caps".encode(), "能力列表后缺少换行"),
        (f"{HASH_A} refs/heads/\xe4\n".encode(), "非 ASCII ref 名"),
    ],
)
def test_parse_ref_line_rejects(payload, description):
    with pytest.raises(MalformedRefLine) as exc_info:
        parse_ref_line(payload)
    assert exc_info.value.payload == payload, description


def test_check_hash():
    assert advertisement.check_hash(f"{HASH_A} x\n".encode()) == HASH_A
    with pytest.raises(MalformedRefLine, match="hash"):
        advertisement.check_hash(b"abc")


def test_check_delimiter():
    data = f"{HASH_A} x\n".encode()
    assert advertisement.check_delimiter(data, 40) == 41
    with pytest.raises(MalformedRefLine, match="space"):
        advertisement.check_delimiter(HASH_A.encode(), 40)


def test_scan_ref_name_stops_at_nul_or_newline():
    assert advertisement.scan_ref_name(b"HEAD\x00caps\n", 0) == ("HEAD", 4)
    assert advertisement.scan_ref_name(b"HEAD\n", 0) == ("HEAD", 4)
    assert advertisement.scan_ref_name(b"HEAD", 0) == ("HEAD", 4)


def test_split_capabilities():
    assert advertisement.split_capabilities(b"\x00a b\n", 0) == (b"a b", 4)
    assert advertisement.split_capabilities(b"\n", 0) == (None, 0)


def test_check_trailing_newline():
    advertisement.check_trailing_newline(b"abc\n", 3)
    with pytest.raises(MalformedRefLine, match="newline"):
        advertisement.check_trailing_newline(b"abc", 3)
    with pytest.raises(MalformedRefLine, match="after newline"):
        advertisement.check_trailing_newline(b"abc\nd", 3)
