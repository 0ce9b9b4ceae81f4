"""meta-core API 客户端

meta-core 保存各插件提取出的元数据。写入只是尽力而为：
meta-core 不可用（独立运行、测试环境）时不抛异常、不重试、不排队，
任务的权威结果通过回调返回。
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import httpx
from loguru import logger

from ...config import MetaWriteMode


class MetaCoreClient:
    """meta-core 客户端，所有方法都不会抛出异常"""

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient,
        *,
        timeout: float = 5.0,
        write_mode: MetaWriteMode = MetaWriteMode.MERGE,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.write_mode = write_mode
        self._client = client
        self._timeout = timeout

    def _meta_url(self, cid: str, *parts: str) -> str:
        segments = [quote(cid, safe="")] + [quote(p, safe="") for p in parts]
        return f"{self.base_url}/meta/" + "/".join(segments)

    async def _safe_request(self, method: str, url: str, **kwargs: Any) -> Optional[httpx.Response]:
        """发送请求；网络错误或非 2xx/404 状态统一在这里记录日志并吞掉

        Returns:
            Optional[httpx.Response]: 网络失败时返回 None
        """
        try:
            response = await self._client.request(method, url, timeout=self._timeout, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"meta-core 不可用，忽略 {method} {url}: {e!r}")
            return None

        if not response.is_success and response.status_code != 404:
            logger.warning(f"meta-core 返回错误，忽略 {method} {url}: {response.status_code}")
        return response

    async def write(self, cid: str, fields: Mapping[str, str]) -> None:
        """写入一组字段，按配置选择单次合并写入或逐字段写入"""
        if not fields:
            return
        if self.write_mode == MetaWriteMode.PER_FIELD:
            for key, value in fields.items():
                await self.set_property(cid, key, value)
        else:
            await self.merge_metadata(cid, dict(fields))

    async def merge_metadata(self, cid: str, metadata: Dict[str, str]) -> None:
        await self._safe_request("PATCH", self._meta_url(cid), json=metadata)

    async def set_property(self, cid: str, key: str, value: str) -> None:
        await self._safe_request("PUT", self._meta_url(cid, key), json={"value": value})

    async def delete_property(self, cid: str, key: str) -> None:
        await self._safe_request("DELETE", self._meta_url(cid, key))

    async def add_to_set(self, cid: str, key: str, value: str) -> None:
        await self._safe_request("POST", self._meta_url(cid, "_add", key), json={"value": value})

    async def get_property(self, cid: str, key: str) -> Optional[str]:
        response = await self._safe_request("GET", self._meta_url(cid, key))
        if response is None or not response.is_success:
            return None
        data = _json_or_none(response)
        if not isinstance(data, dict):
            return None
        value = data.get("value")
        return None if value is None else str(value)

    async def get_metadata(self, cid: str) -> Dict[str, str]:
        response = await self._safe_request("GET", self._meta_url(cid))
        if response is None or not response.is_success:
            return {}
        data = _json_or_none(response)
        if not isinstance(data, dict) or not isinstance(data.get("metadata"), dict):
            return {}
        return {str(k): str(v) for k, v in data["metadata"].items()}


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        logger.warning(f"meta-core 返回了无效的 JSON: {response.request.url}")
        return None
