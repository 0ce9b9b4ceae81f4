"""测试配置和共享fixture"""

from typing import Callable, Dict, List, Tuple

import httpx
import pytest

from file_info.config import Settings


# PNG 文件头：签名 + IHDR 块
PNG_HEADER = (
    b"\x89PNG\r\n\x1a\n"
    b"\x00\x00\x00\rIHDR"
    b"\x00\x00\x00\x10\x00\x00\x00\x10\x08\x06\x00\x00\x00"
    b"\x1f\xf3\xffa"
) + b"\x00" * 64


class RecordingSink:
    """记录写入内容的 meta-core 替身"""

    def __init__(self):
        self.urls: List[str] = []
        self.writes: List[Tuple[str, Dict[str, str]]] = []

    def factory(self, meta_core_url: str) -> "RecordingSink":
        self.urls.append(meta_core_url)
        return self

    async def write(self, cid: str, fields) -> None:
        self.writes.append((cid, dict(fields)))


@pytest.fixture
def recording_sink():
    """提供记录写入内容的 meta-core 替身"""
    return RecordingSink()


@pytest.fixture
def png_header():
    return PNG_HEADER


@pytest.fixture
def mock_client() -> Callable[..., httpx.AsyncClient]:
    """创建使用 httpx.MockTransport 的异步客户端工厂，所有出站请求都不会访问真实网络"""

    def _create(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _create


@pytest.fixture
def test_settings():
    """测试用配置（不依赖环境变量中的 WebDAV 设置）"""
    return Settings(
        WEBDAV_URL=None,
        META_CORE_TIMEOUT_SECONDS=5,
        REMOTE_RETRY_ATTEMPTS=1,
        REMOTE_RETRY_BACKOFF_SECONDS=0,
    )


@pytest.fixture
def make_request_payload():
    """生成 /process 请求体"""

    def _create(**overrides) -> Dict[str, object]:
        payload = {
            "taskId": "t1",
            "cid": "c1",
            "filePath": "/tmp/readme.txt",
            "callbackUrl": "http://orchestrator/callback",
            "metaCoreUrl": "http://meta-core:9000",
            "existingMeta": {},
        }
        payload.update(overrides)
        return payload

    return _create
