"""任务处理服务

- processor: 单个任务的处理流水线
- dispatcher: 后台分发与回调投递
"""

from .processor import TaskProcessor, run_task
from .dispatcher import TaskDispatcher

__all__ = ["TaskProcessor", "TaskDispatcher", "run_task"]
