"""本地文件系统访问

未配置 WEBDAV_URL 时使用，适用于本地开发和与 meta-sort 共享卷的部署方式。
阻塞的文件操作放到线程池执行，避免卡住事件循环。
"""

from __future__ import annotations

import asyncio
import datetime
import os
import stat as stat_module

from .base import FileAccess, FileAccessError
from ...core.models import FileStats


class LocalFileAccess(FileAccess):
    """直接访问本地文件系统"""

    @property
    def name(self) -> str:
        return "local"

    async def stat(self, path: str) -> FileStats:
        return await asyncio.to_thread(self.stat_sync, path)

    async def read_prefix(self, path: str, max_bytes: int) -> bytes:
        return await asyncio.to_thread(self.read_prefix_sync, path, max_bytes)

    def stat_sync(self, path: str) -> FileStats:
        try:
            stat_info = os.stat(path)
        except OSError as e:
            raise FileAccessError(
                f"无法获取文件信息 {path}: {e.strerror or e}", path=path
            ) from e

        if not stat_module.S_ISREG(stat_info.st_mode):
            raise FileAccessError(f"不是常规文件: {path}", path=path)

        mtime = datetime.datetime.fromtimestamp(stat_info.st_mtime, tz=datetime.timezone.utc)
        return FileStats(size=stat_info.st_size, mtime=mtime)

    def read_prefix_sync(self, path: str, max_bytes: int, start: int = 0) -> bytes:
        if max_bytes <= 0:
            return b""
        try:
            with open(path, "rb") as f:
                if start:
                    f.seek(start)
                return f.read(max_bytes)
        except OSError as e:
            raise FileAccessError(
                f"无法读取文件 {path}: {e.strerror or e}", path=path
            ) from e
