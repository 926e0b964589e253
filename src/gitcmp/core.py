# File: src/gitcmp/core.py
"""
gitcmp 核心引擎 (Core Engine)

职责：
1. 资源组装：Config + HttpClient。
2. 并发获取两个仓库的 RefSet，并在屏障处汇合。
3. 汇合后同步执行比较。
"""

import asyncio
import logging
from dataclasses import dataclass

from .config import GitcmpConfig
from .diff import DiffResult, diff_refs
from .exceptions import RepositoryFetchError
from .fetcher import fetch_remote_refs
from .network import HttpClient
from .protocols.advertisement import RefSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComparisonResult:
    """一次仓库比较的完整结果。"""

    url_a: str
    url_b: str
    refs_a: RefSet
    refs_b: RefSet
    diff: DiffResult

    @property
    def identical(self) -> bool:
        return self.diff.identical

    def report_lines(self) -> list[str]:
        """渲染输出行：先是哈希不同的 ref，然后依次是两边独有的 ref。"""
        lines = [
            f"{m.name} differs: {m.hash_a} vs. {m.hash_b}" for m in self.diff.mismatched
        ]
        lines.extend(f"Only in {self.url_a}: {ref}" for ref in self.diff.only_in_a)
        lines.extend(f"Only in {self.url_b}: {ref}" for ref in self.diff.only_in_b)
        return lines


class GitcmpCore:
    """仓库比较引擎 (Async)。"""

    def __init__(
        self,
        config: GitcmpConfig | None = None,
        client: HttpClient | None = None,
    ) -> None:
        """初始化引擎。

        Args:
            config: 传输配置。为 None 时使用默认值。
            client: HTTP 客户端。为 None 时按 config 创建。
        """
        self.config = config or GitcmpConfig()
        self.client = client or HttpClient(self.config)

    async def fetch_both(self, url_a: str, url_b: str) -> tuple[RefSet, RefSet]:
        """并发获取两个仓库的 RefSet。

        两个任务互相独立，各自只写自己的结果槽。总是等待两者都结束
        (不做取消传播)，然后再报告错误。

        Raises:
            RepositoryFetchError: 任一仓库获取失败 (A 优先于 B)。
        """
        results = await asyncio.gather(
            fetch_remote_refs(url_a, self.client),
            fetch_remote_refs(url_b, self.client),
            return_exceptions=True,
        )

        for url, result in zip((url_a, url_b), results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.error(f"获取 {url} 失败: {result}")
                raise RepositoryFetchError(url, result) from result

        refs_a, refs_b = results
        return refs_a, refs_b

    async def compare(self, url_a: str, url_b: str) -> ComparisonResult:
        """获取两个仓库的 ref 并比较。"""
        refs_a, refs_b = await self.fetch_both(url_a, url_b)
        diff = diff_refs(refs_a, refs_b)
        logger.info(
            f"比较完成: {len(diff.mismatched)} 个不同, "
            f"{len(diff.only_in_a)} 个仅在 A, {len(diff.only_in_b)} 个仅在 B"
        )
        return ComparisonResult(url_a, url_b, refs_a, refs_b, diff)


def compare_repositories(
    url_a: str,
    url_b: str,
    config: GitcmpConfig | None = None,
    client: HttpClient | None = None,
) -> ComparisonResult:
    """同步入口：在新的事件循环中比较两个仓库。"""
    return asyncio.run(GitcmpCore(config, client).compare(url_a, url_b))
