# tests/conftest.py
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# 确保 src 目录在 sys.path 中
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from gitcmp.network import HttpResponse
from gitcmp.protocols.constants import Http

# 摘自 Git 源码 Documentation/technical/http-protocol.txt
SAMPLE_RESPONSE = (
    b"001e# service=git-upload-pack\n"
    b"004895dcfa3633004da0049d3d0fa03f80589cbcaf31 refs/heads/maint\x00multi_ack\n"
    b"003fd049f6c27a2244e12041955e262a404c7faba355 refs/heads/master\n"
    b"003c2cb58b79488a98d2721cea644875a8dd0026b115 refs/tags/v1.0\n"
    b"003fa3c2e2402b99163d1d59756e5f207ae21cccba4c refs/tags/v1.0^{}\n"
)

SAMPLE_REFS = {
    "refs/heads/maint": "95dcfa3633004da0049d3d0fa03f80589cbcaf31",
    "refs/heads/master": "d049f6c27a2244e12041955e262a404c7faba355",
    "refs/tags/v1.0": "2cb58b79488a98d2721cea644875a8dd0026b115",
    "refs/tags/v1.0^{}": "a3c2e2402b99163d1d59756e5f207ae21cccba4c",
}


def make_response(
    body: bytes = SAMPLE_RESPONSE,
    status: int = 200,
    content_type: str | None = Http.CONTENT_TYPE,
    url: str = "https://example.com/repo.git/info/refs?service=git-upload-pack",
) -> HttpResponse:
    """辅助函数：构造一个 HttpResponse"""
    return HttpResponse(url=url, status=status, content_type=content_type, body=body)


@pytest.fixture
def sample_body() -> bytes:
    return SAMPLE_RESPONSE


@pytest.fixture
def sample_refs() -> dict[str, str]:
    return dict(SAMPLE_REFS)


@pytest.fixture
def response_factory():
    """[Fixture] 返回 make_response，供测试构造各种响应"""
    return make_response


@pytest.fixture
def fake_client():
    """[Fixture] 返回一个 get 已 Mock 为异步的 HttpClient 替身，默认返回样例响应。"""
    client = MagicMock()
    client.get = AsyncMock(return_value=make_response())
    return client
