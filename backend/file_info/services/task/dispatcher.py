"""任务分发模块

/process 接口收到任务后立即返回 accepted，实际处理在后台协程中完成，
结果通过回调通知调用方。
"""

from __future__ import annotations

import asyncio
from typing import Optional, Set

import httpx
from loguru import logger

from ...core.schemas import TaskOutcome, TaskRequest
from ..callback import deliver_callback
from .processor import TaskProcessor, run_task


class TaskDispatcher:
    """后台任务分发器

    Args:
        processor: 任务处理器
        client: 投递回调使用的共享 HTTP 客户端
        callback_timeout: 回调请求超时（秒）
        max_concurrency: 同时处理的最大任务数，0 表示不限制
    """

    def __init__(
        self,
        processor: TaskProcessor,
        client: httpx.AsyncClient,
        *,
        callback_timeout: float = 10.0,
        max_concurrency: int = 0,
    ) -> None:
        self.processor = processor
        self._client = client
        self._callback_timeout = callback_timeout
        self._semaphore: Optional[asyncio.Semaphore] = (
            asyncio.Semaphore(max_concurrency) if max_concurrency > 0 else None
        )
        # 保存后台任务的强引用，防止被垃圾回收
        self._tasks: Set[asyncio.Task] = set()

    @property
    def active_count(self) -> int:
        return len(self._tasks)

    def submit(self, request: TaskRequest) -> asyncio.Task:
        """提交任务，不等待处理完成"""
        task = asyncio.create_task(self._run(request), name=f"file-info-{request.task_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug(f"已接收任务 task_id={request.task_id}，当前处理中: {len(self._tasks)}")
        return task

    async def _run(self, request: TaskRequest) -> TaskOutcome:
        if self._semaphore is None:
            return await self._process_and_report(request)
        async with self._semaphore:
            return await self._process_and_report(request)

    async def _process_and_report(self, request: TaskRequest) -> TaskOutcome:
        async def _send(outcome: TaskOutcome) -> None:
            await deliver_callback(
                self._client,
                request.callback_url,
                outcome,
                timeout=self._callback_timeout,
            )

        return await run_task(self.processor, request, _send)

    async def shutdown(self) -> None:
        """等待所有处理中的任务结束"""
        if not self._tasks:
            return
        logger.info(f"等待 {len(self._tasks)} 个处理中的任务结束...")
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
        logger.info("所有任务已结束")
