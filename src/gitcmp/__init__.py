# src/gitcmp/__init__.py
"""
gitcmp v0.1.0
通过 Smart HTTP 协议比较两个远程 Git 仓库的 ref。
"""

__version__ = "0.1.0"

# 暴露配置
from .config import (  # noqa: E402
    GitcmpConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)

# 暴露引擎与比较结果
from .core import ComparisonResult, GitcmpCore, compare_repositories  # noqa: E402
from .diff import DiffResult, RefMismatch, diff_refs  # noqa: E402

# 暴露异常体系 (方便上层 try-except)
from .exceptions import (  # noqa: E402
    AdvertisementError,
    BadPktLine,
    ConfigError,
    FetchError,
    FrameError,
    GitcmpError,
    MalformedLength,
    MalformedRefLine,
    ProtocolError,
    ProtocolMismatch,
    RepositoryFetchError,
    TransportError,
    TruncatedStream,
    UnexpectedContentType,
    UnexpectedStatus,
)
from .fetcher import fetch_remote_refs, info_refs_url  # noqa: E402
from .network import HttpClient, HttpResponse  # noqa: E402
from .protocols.advertisement import RefSet, parse_advertisement  # noqa: E402

__all__ = [
    "GitcmpCore",
    "ComparisonResult",
    "compare_repositories",
    "GitcmpConfig",
    "create_config_from_dict",
    "load_config_from_env",
    "load_config_from_toml",
    "HttpClient",
    "HttpResponse",
    "fetch_remote_refs",
    "info_refs_url",
    "RefSet",
    "parse_advertisement",
    "DiffResult",
    "RefMismatch",
    "diff_refs",
    "GitcmpError",
    "ConfigError",
    "FetchError",
    "TransportError",
    "UnexpectedStatus",
    "UnexpectedContentType",
    "RepositoryFetchError",
    "ProtocolError",
    "FrameError",
    "MalformedLength",
    "TruncatedStream",
    "AdvertisementError",
    "ProtocolMismatch",
    "MalformedRefLine",
    "BadPktLine",
]
