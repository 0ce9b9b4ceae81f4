"""文件访问抽象

任务处理器只依赖 FileAccess 接口，不关心底层是本地文件系统还是 WebDAV。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ...core.models import FileName, FileStats


class FileAccessError(Exception):
    """文件无法获取信息或无法读取

    Attributes:
        path: 尝试访问的文件路径
        status_code: 远程访问时的 HTTP 状态码，本地访问或网络错误时为 None
    """

    def __init__(self, message: str, *, path: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.path = path
        self.status_code = status_code


def parse_file_name(path: str) -> FileName:
    """从路径中解析文件名和扩展名，纯字符串处理，不会失败

    扩展名取最后一个点之后的部分并转小写；没有点、只有前导点（如 .bashrc）
    或以点结尾的文件名没有扩展名。

    Example:
        >>> parse_file_name("/movies/Movie.Name.2010.1080p.mkv")
        FileName(file_name='Movie.Name.2010.1080p.mkv', extension='mkv')
    """
    file_name = path.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]
    dot = file_name.rfind(".")
    if dot <= 0:
        return FileName(file_name, "")
    return FileName(file_name, file_name[dot + 1:].lower())


class FileAccess(ABC):
    """文件访问接口"""

    @property
    @abstractmethod
    def name(self) -> str:
        """访问方式名称，用于日志"""

    @abstractmethod
    async def stat(self, path: str) -> FileStats:
        """获取文件大小和修改时间

        Raises:
            FileAccessError: 文件不存在、无权限或远程请求失败
        """

    @abstractmethod
    async def read_prefix(self, path: str, max_bytes: int) -> bytes:
        """读取文件开头最多 max_bytes 个字节

        Raises:
            FileAccessError: 文件无法读取
        """

    async def exists(self, path: str) -> bool:
        try:
            await self.stat(path)
        except FileAccessError:
            return False
        return True

    def parse_name(self, path: str) -> FileName:
        return parse_file_name(path)
