# src/gitcmp/protocols/constants.py
"""
gitcmp 协议层 - 常量定义

Smart HTTP 协议 (ref 广告阶段) 用到的魔法数字与固定值。
采用命名空间 (Class Namespace) 组织。
"""

# =========================================================================
# 1. pkt-line 分帧
# =========================================================================


class PktLine:
    """pkt-line 分帧常量"""

    # 长度字段固定为 4 个十六进制字符，数值包含自身的 4 字节
    HEADER_LEN = 4

    # flush-pkt: 保留的哨兵值，不是合法长度
    FLUSH = b"0000"

    # 合法长度范围 (含帧头)
    MIN_LEN = 4
    MAX_LEN = 65520

    # 单帧最大负载
    MAX_PAYLOAD = MAX_LEN - HEADER_LEN


# =========================================================================
# 2. Ref 广告
# =========================================================================


class Advertisement:
    """Ref 广告语法常量"""

    # 握手特征: 前 5 字节为 "4 位小写十六进制 + '#'"
    SIGNATURE_LEN = 5
    SIGNATURE_MARK = ord("#")

    # 服务声明注释行 (出现在任何位置都跳过)
    SERVICE_ANNOUNCEMENT = b"# service=git-upload-pack\n"

    # Ref 行: <40 hex> SP <name> [NUL <capabilities>] LF
    HASH_LEN = 40
    DELIMITER = ord(" ")
    CAPABILITIES_MARK = 0x00
    NEWLINE = ord("\n")

    # 可打印字符范围 (ASCII)
    PRINTABLE_MIN = 0x20
    PRINTABLE_MAX = 0x7E


HEX_DIGITS = b"0123456789abcdef"
HEX_DIGITS_ANY_CASE = b"0123456789abcdefABCDEF"


# =========================================================================
# 3. HTTP 发现接口
# =========================================================================


class Http:
    """Smart HTTP 发现接口常量"""

    SERVICE = "git-upload-pack"
    INFO_REFS_PATH = f"info/refs?service={SERVICE}"
    STATUS_OK = 200
    CONTENT_TYPE = "application/x-git-upload-pack-advertisement"
