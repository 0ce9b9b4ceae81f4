"""
任务处理API路由模块

接收编排系统的处理请求。任务在后台执行，接口立即返回 accepted，
处理结果稍后 POST 到请求中的 callbackUrl。
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Request
from loguru import logger
from pydantic import ValidationError

from ...core.schemas import ProcessResponse, TaskRequest


process_router = APIRouter(tags=["process"])


@process_router.post("/process", response_model=ProcessResponse, response_model_exclude_none=True)
async def process(
    request: Request,
    payload: Dict[str, Any] = Body(..., description="任务请求：taskId、cid、filePath、callbackUrl、metaCoreUrl 必填"),
) -> ProcessResponse:
    """
    提交一个文件处理任务

    缺少任一必填字段（或字段为空）时返回 rejected，不会进入处理流程。

    Args:
        request: 用于获取 app.state.dispatcher
        payload: 任务请求体

    Returns:
        ProcessResponse: accepted 或 rejected
    """
    try:
        task_request = TaskRequest.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"拒绝任务，缺少必填字段: {e.error_count()} 个字段校验失败")
        return ProcessResponse(status="rejected", error="Missing required fields")

    request.app.state.dispatcher.submit(task_request)
    return ProcessResponse(status="accepted")
