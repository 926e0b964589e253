# File: src/gitcmp/exceptions.py
"""
gitcmp - 异常体系 (Exceptions)

定义库内统一使用的异常类，以便上层应用（如 CLI）能进行精细的错误处理。
所有异常都是终止性的：库内部不做任何局部恢复或重试。
"""


def _preview(data: bytes, limit: int = 64) -> str:
    """返回适合写入错误信息的字节预览 (repr 形式，过长时截断)。"""
    if len(data) <= limit:
        return repr(data)
    return f"{data[:limit]!r}... ({len(data)} bytes)"


class GitcmpError(Exception):
    """gitcmp 所有内部异常的基类。

    上层应用可以通过捕获此异常来处理所有由 gitcmp 抛出的已知错误。
    """

    pass


class ConfigError(GitcmpError):
    """配置加载或校验失败。

    触发场景:
    1. 字段格式错误 (如 timeout 不是数字、Header 无法解析)。
    2. 找不到配置文件或指定的 profile。
    3. 未检测到任何 GITCMP_ 环境变量。
    """

    pass


# =========================================================================
# 1. 获取阶段 (Fetch Stage)
# =========================================================================


class FetchError(GitcmpError):
    """获取远程 Ref 时的错误 (HTTP 层面)。

    Attributes:
        url: 出错时请求的 URL (可能为 None)。
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class TransportError(FetchError):
    """传输层错误 (I/O 级别)。

    触发场景:
    1. DNS 解析失败、连接被拒绝。
    2. 请求超时 (超时策略由 HttpClient 的配置决定)。
    3. 响应体超过配置的上限。

    注意: 本库不做重试，由调用方决定是否重来。
    """

    pass


class UnexpectedStatus(FetchError):
    """HTTP 状态码不是 200。"""

    def __init__(self, status: int, url: str | None = None) -> None:
        super().__init__(f"bad response status {status}", url)
        self.status = status


class UnexpectedContentType(FetchError):
    """响应的 Content-Type 与期望值不完全一致。"""

    def __init__(self, content_type: str | None, url: str | None = None) -> None:
        super().__init__(f"bad response Content-Type {content_type!r}", url)
        self.content_type = content_type


class RepositoryFetchError(FetchError):
    """并发获取时某个仓库失败，由引擎包装后抛出。

    Attributes:
        error: 原始异常 (同时作为 __cause__ 链接)。
    """

    def __init__(self, url: str, error: BaseException) -> None:
        super().__init__(f"Fetching {url}: {error}", url)
        self.error = error


# =========================================================================
# 2. 协议阶段 (Protocol Stage)
# =========================================================================


class ProtocolError(GitcmpError):
    """协议解析错误 (逻辑级别)。"""

    pass


class FrameError(ProtocolError):
    """pkt-line 分帧错误的基类。"""

    pass


class MalformedLength(FrameError):
    """长度字段不是合法的 4 位十六进制，或数值超出 [4, 65520]。"""

    def __init__(self, field: bytes, reason: str = "") -> None:
        message = f"bad pkt-len {field!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.field = field


class TruncatedStream(FrameError):
    """可用字节少于长度字段 (或帧头) 声明的字节数。"""

    def __init__(self, expected: int, available: int, what: str = "payload") -> None:
        super().__init__(
            f"truncated pkt-line {what}: expected {expected} bytes, got {available}"
        )
        self.expected = expected
        self.available = available


class AdvertisementError(ProtocolError):
    """Ref 广告 (info/refs) 解析阶段的错误基类。"""

    pass


class ProtocolMismatch(AdvertisementError):
    """响应的前 5 个字节不符合 "4 位十六进制 + '#'" 的握手特征。

    通常意味着服务器没有说 smart HTTP 协议 (例如返回了 HTML 页面)。
    """

    def __init__(self, head: bytes) -> None:
        super().__init__(f"first five bytes {head[:5]!r} are bad")
        self.head = head


class MalformedRefLine(AdvertisementError):
    """数据帧不符合 Ref 行语法。

    Attributes:
        payload: 出错的原始数据帧内容，用于诊断。
    """

    def __init__(self, payload: bytes, reason: str = "") -> None:
        message = f"bad ref line {_preview(payload)}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.payload = payload
        self.reason = reason


class BadPktLine(AdvertisementError):
    """解析广告时底层分帧失败。

    原始的 FrameError 保存在 `error` 中，并作为 __cause__ 链接。
    """

    def __init__(self, error: FrameError) -> None:
        super().__init__(f"bad pkt-line: {error}")
        self.error = error
