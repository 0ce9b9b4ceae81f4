"""meta-core 元数据写入服务"""

from typing import Callable

import httpx

from .client import MetaCoreClient
from ...config import Settings

SinkFactory = Callable[[str], MetaCoreClient]


def create_sink_factory(settings: Settings, client: httpx.AsyncClient) -> SinkFactory:
    """返回按 metaCoreUrl 创建 MetaCoreClient 的工厂，所有客户端共享同一个连接池"""

    def _factory(meta_core_url: str) -> MetaCoreClient:
        return MetaCoreClient(
            meta_core_url,
            client,
            timeout=settings.META_CORE_TIMEOUT_SECONDS,
            write_mode=settings.META_CORE_WRITE_MODE,
        )

    return _factory


__all__ = ["MetaCoreClient", "SinkFactory", "create_sink_factory"]
