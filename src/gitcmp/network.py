# src/gitcmp/network.py
"""
gitcmp - 网络模块 (Network) [Asyncio Edition]

封装 HTTP GET 请求的发送与响应读取。
底层使用阻塞的 urllib.request，通过 asyncio.to_thread 放到工作线程中执行，
以便两个仓库的请求可以并发进行。该模块只负责传输，不解释响应内容。
"""

import asyncio
import http.client
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass

from .config import GitcmpConfig
from .exceptions import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """一次 HTTP 请求的结果 (状态码、Content-Type 与完整响应体)。"""

    url: str
    status: int
    content_type: str | None
    body: bytes


class HttpClient:
    """
    基于 urllib 的异步 HTTP 客户端。

    超时策略由 config.timeout 决定；本类不做重试。
    """

    def __init__(self, config: GitcmpConfig | None = None):
        self.config = config or GitcmpConfig()

    def _build_request(self, url: str) -> urllib.request.Request:
        headers = {"User-Agent": self.config.user_agent}
        headers.update(dict(self.config.extra_headers))
        return urllib.request.Request(url, headers=headers, method="GET")

    def _read_body(self, response, url: str) -> bytes:
        limit = self.config.max_body_bytes
        body = response.read(limit + 1)
        if len(body) > limit:
            raise TransportError(f"响应体超过上限 ({limit} bytes)", url)
        return body

    def _get_sync(self, url: str) -> HttpResponse:
        """[Internal] 阻塞执行 GET，在工作线程中调用。"""
        try:
            request = self._build_request(url)
            with urllib.request.urlopen(request, timeout=self.config.timeout) as response:
                body = self._read_body(response, url)
                return HttpResponse(
                    url=url,
                    status=response.status,
                    content_type=response.headers.get("Content-Type"),
                    body=body,
                )

        except urllib.error.HTTPError as e:
            # 非 2xx 也是一个完整的响应，交给上层判断
            e.close()
            return HttpResponse(
                url=url,
                status=e.code,
                content_type=e.headers.get("Content-Type") if e.headers else None,
                body=b"",
            )
        except urllib.error.URLError as e:
            raise TransportError(f"请求失败: {e.reason}", url) from e
        except TimeoutError as e:
            raise TransportError(f"请求超时 ({self.config.timeout}s)", url) from e
        except (OSError, http.client.HTTPException) as e:
            raise TransportError(f"传输错误: {e}", url) from e
        except ValueError as e:
            # 无法识别的 URL 协议、非法的 Header 值
            raise TransportError(f"无效请求: {e}", url) from e

    async def get(self, url: str) -> HttpResponse:
        """
        发送 GET 请求并读取完整响应体 (Async)。

        Raises:
            TransportError: 连接、DNS、超时等传输层失败。
        """
        logger.debug(f"GET {url}")
        response = await asyncio.to_thread(self._get_sync, url)
        logger.debug(
            f"{url} -> {response.status} {response.content_type} "
            f"({len(response.body)} bytes)"
        )
        return response
