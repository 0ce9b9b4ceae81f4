"""服务层包

按领域组织的服务层模块：
- access: 文件访问（本地文件系统 / WebDAV）
- metadata: meta-core 元数据写入
- callback: 任务结果回调投递
- task: 任务处理与分发
"""

from .access import FileAccess, FileAccessError, create_file_access
from .metadata import MetaCoreClient, create_sink_factory
from .callback import deliver_callback
from .task import TaskProcessor, TaskDispatcher, run_task

__all__ = [
    # Access services
    "FileAccess",
    "FileAccessError",
    "create_file_access",
    # Metadata services
    "MetaCoreClient",
    "create_sink_factory",
    # Task services
    "deliver_callback",
    "TaskProcessor",
    "TaskDispatcher",
    "run_task",
]
