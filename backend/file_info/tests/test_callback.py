"""回调投递 (callback.py) 的单元测试"""

import json

import httpx
import pytest

from file_info.core.models import FileCategory, TaskStatus
from file_info.core.schemas import FileFacts, TaskOutcome
from file_info.services.callback import deliver_callback

CALLBACK_URL = "http://orchestrator/callback"


def completed_outcome() -> TaskOutcome:
    return TaskOutcome(
        task_id="t1",
        status=TaskStatus.COMPLETED,
        duration=12,
        metadata=FileFacts(
            file_type=FileCategory.DOCUMENT,
            mime_type="text/plain",
            size_byte=19,
            file_name="readme.txt",
            extension="txt",
            file_path="/tmp/readme.txt",
        ),
    )


@pytest.mark.asyncio
async def test_deliver_completed_outcome(mock_client):
    """
    Given: 一个成功的任务结果
    When: 投递回调
    Then: 以 camelCase JSON POST 到 callbackUrl，不包含 error 字段
    """
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200)

    delivered = await deliver_callback(mock_client(handler), CALLBACK_URL, completed_outcome())

    assert delivered is True
    assert len(requests) == 1
    assert requests[0].method == "POST"
    assert str(requests[0].url) == CALLBACK_URL
    body = json.loads(requests[0].content)
    assert body["taskId"] == "t1"
    assert body["status"] == "completed"
    assert body["duration"] == 12
    assert "error" not in body
    assert body["metadata"]["fileType"] == "document"
    assert body["metadata"]["sizeByte"] == 19


@pytest.mark.asyncio
async def test_deliver_failed_outcome_includes_error(mock_client):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(204)

    outcome = TaskOutcome(task_id="t2", status=TaskStatus.FAILED, duration=3, error="not found")

    assert await deliver_callback(mock_client(handler), CALLBACK_URL, outcome) is True
    body = json.loads(requests[0].content)
    assert body == {"taskId": "t2", "status": "failed", "duration": 3, "error": "not found"}


@pytest.mark.asyncio
async def test_deliver_error_status_returns_false(mock_client):
    client = mock_client(lambda request: httpx.Response(500))

    assert await deliver_callback(client, CALLBACK_URL, completed_outcome()) is False


@pytest.mark.asyncio
async def test_deliver_network_error_returns_false(mock_client):
    """回调方不可达时只记录日志，不抛出异常"""

    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    assert await deliver_callback(mock_client(handler), CALLBACK_URL, completed_outcome()) is False
