import datetime
from enum import StrEnum
from typing import NamedTuple, Optional


class FileCategory(StrEnum):
    """文件粗分类

    IMAGE 只在启用独立图片类型时出现，否则图片归入 DOCUMENT。
    """

    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"
    SUBTITLE = "subtitle"
    TORRENT = "torrent"
    ARCHIVE = "archive"
    IMAGE = "image"
    OTHER = "other"
    UNDEFINED = "undefined"


# 任务结果状态，SKIPPED 为预留值，本插件不会产生
class TaskStatus:
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


class TaskStage(StrEnum):
    """单个任务的处理阶段，只会单向推进一次"""

    START = "start"
    ACCESSING = "accessing"
    CLASSIFYING = "classifying"
    PERSISTING = "persisting"
    REPORTING = "reporting"


class FileStats(NamedTuple):
    """文件统计信息"""
    size: int
    mtime: Optional[datetime.datetime] = None


class FileName(NamedTuple):
    """从路径中解析出的文件名和扩展名"""
    file_name: str
    extension: str
