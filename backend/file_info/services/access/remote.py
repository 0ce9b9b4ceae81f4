"""WebDAV 远程文件访问

容器化部署时插件看不到 meta-sort 的文件系统，改为通过 meta-sort nginx 提供的 WebDAV 访问：

    HEAD {WEBDAV_URL}/watch/movie.mkv                      -> 文件大小、修改时间
    GET  {WEBDAV_URL}/watch/movie.mkv  Range: bytes=0-4095 -> 文件头（魔数检测）

本地路径 /files/watch/movie.mkv 去掉 /files 前缀后拼接到 WEBDAV_URL。
"""

from __future__ import annotations

from email.utils import parsedate_to_datetime
from typing import Optional
from urllib.parse import quote

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .base import FileAccess, FileAccessError
from ...core.models import FileStats

# Range GET 成功的状态码：206 为部分内容，200 表示服务器忽略了 Range 返回整个文件
RANGE_OK_STATUSES = (200, 206)


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(f"WebDAV 请求网络错误，第 {retry_state.attempt_number} 次尝试失败: {exc}")


class RemoteFileAccess(FileAccess):
    """通过 WebDAV（HTTP HEAD + Range GET）访问文件"""

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient,
        *,
        path_prefix: str = "/files",
        timeout: float = 30.0,
        retry_attempts: int = 3,
        retry_backoff: float = 1.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.path_prefix = path_prefix.rstrip("/")
        self._client = client
        self._timeout = timeout
        self._retry_attempts = retry_attempts
        self._retry_backoff = retry_backoff

    @property
    def name(self) -> str:
        return "webdav"

    def to_remote_url(self, path: str) -> str:
        """把本地风格的绝对路径转换为 WebDAV URL

        只在路径段边界上去掉前缀：/files/watch/a.mkv -> /watch/a.mkv，
        而 /filesystem/a.mkv 保持不变。结果与 base_url 之间恰好一个斜杠。
        """
        relative = path
        prefix = self.path_prefix
        if prefix:
            if relative == prefix:
                relative = ""
            elif relative.startswith(prefix + "/"):
                relative = relative[len(prefix):]
        relative = "/" + relative.lstrip("/")
        return self.base_url + quote(relative, safe="/")

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=self._retry_backoff, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=_log_retry,
            reraise=True,
        )

    async def stat(self, path: str) -> FileStats:
        url = self.to_remote_url(path)
        try:
            async for attempt in self._retrying():
                with attempt:
                    response = await self._client.head(url, timeout=self._timeout)
        except httpx.TransportError as e:
            raise FileAccessError(f"WebDAV HEAD 请求失败 {path}: {e}", path=path) from e

        if not response.is_success:
            raise FileAccessError(
                f"WebDAV HEAD 请求失败 {path}: {response.status_code} {response.reason_phrase}",
                path=path,
                status_code=response.status_code,
            )

        return FileStats(
            size=_parse_content_length(response.headers.get("content-length")),
            mtime=_parse_last_modified(response.headers.get("last-modified")),
        )

    async def read_prefix(self, path: str, max_bytes: int) -> bytes:
        return await self.read_bytes(path, 0, max_bytes - 1)

    async def read_bytes(self, path: str, start: int, end: int) -> bytes:
        """读取 [start, end] 闭区间内的字节

        服务器忽略 Range 返回 200 时，只读取需要的长度后断开，不会下载整个文件。
        """
        if end < start:
            return b""
        url = self.to_remote_url(path)
        try:
            async for attempt in self._retrying():
                with attempt:
                    return await self._fetch_range(path, url, start, end)
        except httpx.TransportError as e:
            raise FileAccessError(f"WebDAV Range GET 请求失败 {path}: {e}", path=path) from e
        return b""  # pragma: no cover - AsyncRetrying 总会返回或抛出

    async def _fetch_range(self, path: str, url: str, start: int, end: int) -> bytes:
        limit = end - start + 1
        headers = {"Range": f"bytes={start}-{end}"}
        async with self._client.stream("GET", url, headers=headers, timeout=self._timeout) as response:
            if response.status_code not in RANGE_OK_STATUSES:
                raise FileAccessError(
                    f"WebDAV Range GET 请求失败 {path}: {response.status_code} {response.reason_phrase}",
                    path=path,
                    status_code=response.status_code,
                )

            # 200 时响应体从文件开头算起
            skip = start if response.status_code == 200 else 0
            buffer = bytearray()
            async for chunk in response.aiter_bytes():
                buffer.extend(chunk)
                if len(buffer) >= skip + limit:
                    break
            return bytes(buffer[skip:skip + limit])


def _parse_content_length(value: Optional[str]) -> int:
    if not value:
        return 0
    try:
        return max(int(value), 0)
    except ValueError:
        logger.warning(f"无法解析 Content-Length: {value}")
        return 0


def _parse_last_modified(value: Optional[str]):
    if not value:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.warning(f"无法解析 Last-Modified: {value}")
        return None
