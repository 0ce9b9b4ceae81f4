"""任务处理器模块

对单个文件执行 file-info 处理流水线，每个任务只走一遍：
START -> ACCESSING -> CLASSIFYING -> PERSISTING -> REPORTING
任何阶段的致命错误都会直接转到 REPORTING(failed)。
"""

from __future__ import annotations

import time
from typing import Awaitable, Callable, Optional

from loguru import logger

from ...core.classifier import TypeClassifier
from ...core.models import TaskStage, TaskStatus
from ...core.schemas import FileFacts, TaskOutcome, TaskRequest
from ..access import FileAccess
from ..metadata import SinkFactory

SendCallback = Callable[[TaskOutcome], Awaitable[None]]


def _elapsed_ms(start: float) -> int:
    return max(int((time.monotonic() - start) * 1000), 0)


class TaskProcessor:
    """file-info 任务处理器

    依赖全部通过构造函数注入，处理器本身不保存任务之间的状态，
    多个任务可以在同一个实例上并发执行。
    """

    def __init__(
        self,
        file_access: FileAccess,
        classifier: TypeClassifier,
        sink_factory: SinkFactory,
        *,
        sniff_bytes: int = 4096,
    ) -> None:
        self.file_access = file_access
        self.classifier = classifier
        self.sink_factory = sink_factory
        self.sniff_bytes = sniff_bytes

    async def process(self, request: TaskRequest) -> TaskOutcome:
        """处理单个任务，总是返回一个 TaskOutcome，不抛出异常

        处理流程：
        1. 解析文件名和扩展名
        2. 获取文件大小（失败则任务失败）
        3. 读取文件头做魔数检测（失败只降级为按扩展名识别）
        4. 确定 MIME 类型和文件分类
        5. 一次性写入 meta-core（失败不影响任务结果）
        6. 返回包含耗时和 FileFacts 的结果
        """
        start = time.monotonic()
        ctx_logger = logger.bind(task_id=request.task_id, cid=request.cid)
        stage = TaskStage.START
        ctx_logger.info(f"开始处理文件: {request.file_path} (访问方式: {self.file_access.name})")

        try:
            file_name, extension = self.file_access.parse_name(request.file_path)

            stage = TaskStage.ACCESSING
            ctx_logger.debug(f"进入阶段 {stage}")
            stats = await self.file_access.stat(request.file_path)
            content_mime = await self._sniff(request.file_path, ctx_logger)

            stage = TaskStage.CLASSIFYING
            ctx_logger.debug(f"进入阶段 {stage}")
            mime_type = self.classifier.mime_type_for(extension, content_mime)
            file_type = self.classifier.category_for(extension, mime_type)

            facts = FileFacts(
                file_type=file_type,
                mime_type=mime_type,
                size_byte=stats.size,
                file_name=file_name,
                extension=extension,
                file_path=request.file_path,
            )

            stage = TaskStage.PERSISTING
            ctx_logger.debug(f"进入阶段 {stage}")
            sink = self.sink_factory(request.meta_core_url)
            await sink.write(request.cid, facts.to_meta_fields())

            stage = TaskStage.REPORTING
            duration = _elapsed_ms(start)
            ctx_logger.info(
                f"处理完成 {file_name}: fileType={file_type}, mimeType={mime_type}, "
                f"sizeByte={stats.size}，耗时 {duration}ms"
            )
            return TaskOutcome(
                task_id=request.task_id,
                status=TaskStatus.COMPLETED,
                duration=duration,
                metadata=facts,
            )

        except Exception as e:
            duration = _elapsed_ms(start)
            error_message = str(e) or type(e).__name__
            ctx_logger.error(f"处理失败（阶段: {stage}），耗时 {duration}ms: {error_message}")
            return TaskOutcome(
                task_id=request.task_id,
                status=TaskStatus.FAILED,
                duration=duration,
                error=error_message,
            )

    async def _sniff(self, path: str, ctx_logger) -> Optional[str]:
        """读取文件头并检测 MIME 类型，任何失败都视为没有检测结果"""
        try:
            data = await self.file_access.read_prefix(path, self.sniff_bytes)
            content_mime = self.classifier.sniff(data)
        except Exception as e:
            ctx_logger.warning(f"魔数检测失败，改用扩展名识别: {e}")
            return None

        if content_mime:
            ctx_logger.debug(f"魔数检测结果: {content_mime}")
        return content_mime


async def run_task(
    processor: TaskProcessor,
    request: TaskRequest,
    send_callback: SendCallback,
) -> TaskOutcome:
    """处理任务并把结果交给回调，回调的异常只记录日志"""
    outcome = await processor.process(request)
    try:
        await send_callback(outcome)
    except Exception as e:
        logger.error(f"回调发送异常 task_id={request.task_id}: {e}")
    return outcome
