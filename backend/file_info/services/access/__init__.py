"""文件访问服务

- base: FileAccess 接口、FileAccessError 与文件名解析
- local: 本地文件系统实现
- remote: WebDAV 实现

访问方式只在进程启动时由 create_file_access 选择一次。
"""

import httpx
from loguru import logger

from .base import FileAccess, FileAccessError, parse_file_name
from .local import LocalFileAccess
from .remote import RemoteFileAccess
from ...config import Settings


def create_file_access(settings: Settings, client: httpx.AsyncClient) -> FileAccess:
    """根据配置创建文件访问实现：设置了 WEBDAV_URL 用 WebDAV，否则直接访问文件系统"""
    if settings.WEBDAV_URL:
        logger.info(f"使用 WebDAV 访问文件: {settings.WEBDAV_URL}")
        return RemoteFileAccess(
            settings.WEBDAV_URL,
            client,
            path_prefix=settings.WEBDAV_PATH_PREFIX,
            timeout=settings.REMOTE_TIMEOUT_SECONDS,
            retry_attempts=settings.REMOTE_RETRY_ATTEMPTS,
            retry_backoff=settings.REMOTE_RETRY_BACKOFF_SECONDS,
        )

    logger.info("未设置 WEBDAV_URL，直接访问本地文件系统")
    return LocalFileAccess()


__all__ = [
    "FileAccess",
    "FileAccessError",
    "LocalFileAccess",
    "RemoteFileAccess",
    "create_file_access",
    "parse_file_name",
]
