"""
gitcmp - 远程 Ref 获取 (Remote Ref Fetcher)

通过 Smart HTTP 协议的发现接口获取远程仓库暴露的所有 ref。
协议细节见 Git 源码树中的 Documentation/technical/http-protocol.txt。
只支持 HTTP 与 HTTPS URL。
"""

import logging

from .exceptions import UnexpectedContentType, UnexpectedStatus
from .network import HttpClient
from .protocols.advertisement import RefSet, parse_advertisement
from .protocols.constants import Http

logger = logging.getLogger(__name__)


def info_refs_url(repo_url: str) -> str:
    """规范化仓库 URL (恰好一个结尾斜杠)，并拼接 ref 发现路径。"""
    return repo_url.rstrip("/") + "/" + Http.INFO_REFS_PATH


async def fetch_remote_refs(repo_url: str, client: HttpClient | None = None) -> RefSet:
    """获取远程仓库的所有 ref。

    Args:
        repo_url: 仓库基础 URL (如 https://github.com/git/git.git)。
        client: HTTP 客户端。为 None 时使用默认配置的 HttpClient()。

    Returns:
        RefSet: ref 名 (如 "refs/heads/master") -> 40 位哈希。

    Raises:
        TransportError: 传输层失败，不重试。
        UnexpectedStatus: 状态码不是 200。
        UnexpectedContentType: Content-Type 不是 ref 广告类型。
        AdvertisementError: 响应体解析失败。
    """
    if client is None:
        client = HttpClient()

    url = info_refs_url(repo_url)
    response = await client.get(url)

    # 先确认我们确实在和 git 对话
    if response.status != Http.STATUS_OK:
        raise UnexpectedStatus(response.status, url)
    if response.content_type != Http.CONTENT_TYPE:
        raise UnexpectedContentType(response.content_type, url)

    refs = parse_advertisement(response.body)
    logger.info(f"{repo_url}: 获取到 {len(refs)} 个 ref")
    return refs
