"""回调投递

任务结束后把 TaskOutcome 以 JSON POST 到请求中的 callbackUrl。
投递失败只记录日志，不重试，也不会改变已经产生的结果。
"""

from __future__ import annotations

import httpx
from loguru import logger

from ..core.schemas import TaskOutcome


async def deliver_callback(
    client: httpx.AsyncClient,
    callback_url: str,
    outcome: TaskOutcome,
    *,
    timeout: float = 10.0,
) -> bool:
    """投递任务结果

    Returns:
        bool: 回调方返回 2xx 时为 True
    """
    try:
        response = await client.post(callback_url, json=outcome.to_payload(), timeout=timeout)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error(f"回调投递失败 task_id={outcome.task_id} url={callback_url}: {e!r}")
        return False

    if not response.is_success:
        logger.error(
            f"回调投递失败 task_id={outcome.task_id} url={callback_url}: "
            f"{response.status_code} {response.reason_phrase}"
        )
        return False

    logger.debug(f"回调投递成功 task_id={outcome.task_id} status={outcome.status}")
    return True
