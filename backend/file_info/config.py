from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from loguru import logger

from .core.classifier import MIN_SNIFF_BYTES


class LogLevel(str, Enum):
    """日志级别枚举"""
    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class MetaWriteMode(str, Enum):
    """meta-core 写入方式"""
    MERGE = "merge"
    PER_FIELD = "per_field"


class Settings(BaseSettings):
    """file-info 插件全局配置。

    所有字段均可通过环境变量或 `.env` 文件注入。
    只有 `main.py` 直接读取单例，业务模块通过参数注入获得配置。
    """

    # —— 服务监听 ——
    HOST: str = Field("0.0.0.0", description="HTTP 服务监听地址")
    PORT: int = Field(8080, description="HTTP 服务监听端口", ge=1, le=65535)

    # —— 日志 ——
    LOG_LEVEL: LogLevel = Field(
        LogLevel.INFO,
        description="日志级别"
    )

    # —— 文件访问（WebDAV） ——
    WEBDAV_URL: Optional[str] = Field(
        default=None,
        description="WebDAV 基础URL，如 http://meta-sort-dev/webdav；未设置时直接访问本地文件系统"
    )
    WEBDAV_PATH_PREFIX: str = Field(
        default="/files",
        description="转换为 WebDAV URL 前需要去掉的本地路径前缀"
    )
    REMOTE_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="WebDAV HEAD / Range GET 请求超时（秒）",
        gt=0
    )
    REMOTE_RETRY_ATTEMPTS: int = Field(
        default=3,
        description="WebDAV 请求遇到网络错误时的最大尝试次数（HTTP 状态错误不重试）",
        ge=1,
        le=10
    )
    REMOTE_RETRY_BACKOFF_SECONDS: float = Field(
        default=1.0,
        description="WebDAV 重试的指数退避系数（秒）",
        ge=0
    )

    # —— meta-core / 回调 ——
    META_CORE_TIMEOUT_SECONDS: float = Field(
        default=5.0,
        description="写入 meta-core 的请求超时（秒）",
        gt=0
    )
    META_CORE_WRITE_MODE: MetaWriteMode = Field(
        default=MetaWriteMode.MERGE,
        description="merge: 单次 PATCH 合并写入；per_field: 逐字段 PUT（旧接口）"
    )
    CALLBACK_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="回调投递的请求超时（秒）",
        gt=0
    )

    # —— 类型识别策略 ——
    SNIFF_BYTES: int = Field(
        default=4096,
        description="魔数检测时读取的文件头字节数",
        ge=MIN_SNIFF_BYTES,
        le=1024 * 1024
    )
    FALLBACK_FILE_TYPE: str = Field(
        default="other",
        description="无法识别时使用的文件类型: other / undefined"
    )
    SEPARATE_IMAGE_CATEGORY: bool = Field(
        default=False,
        description="图片是否作为独立的 image 类型（关闭时归入 document）"
    )
    MIME_CATEGORY_FALLBACK: bool = Field(
        default=True,
        description="扩展名无法识别时，是否根据 MIME 类型推断文件类型"
    )

    # —— 并发 ——
    MAX_CONCURRENT_TASKS: int = Field(
        default=0,
        description="同时处理的最大任务数，0 表示不限制",
        ge=0
    )

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        env_prefix="",
        case_sensitive=True,
        validate_default=True,
        extra="ignore",
    )

    # —— 验证器 ——
    @field_validator("WEBDAV_URL")
    @classmethod
    def validate_webdav_url(cls, v: Optional[str]) -> Optional[str]:
        """验证 WebDAV URL 格式，空字符串视为未设置"""
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not (v.startswith("http://") or v.startswith("https://")):
            raise ValueError(f"WEBDAV_URL 必须以 http:// 或 https:// 开头: {v}")
        return v

    @field_validator("WEBDAV_PATH_PREFIX")
    @classmethod
    def validate_path_prefix(cls, v: str) -> str:
        """验证路径前缀以 / 开头，并去掉末尾的 /"""
        if not v.startswith("/"):
            raise ValueError(f"WEBDAV_PATH_PREFIX 必须以'/'开头: {v}")
        return v.rstrip("/") or "/"

    @field_validator("FALLBACK_FILE_TYPE")
    @classmethod
    def validate_fallback_file_type(cls, v: str) -> str:
        """兜底类型只能是 other 或 undefined"""
        v = v.strip().lower()
        if v not in ("other", "undefined"):
            raise ValueError(f"FALLBACK_FILE_TYPE 只能是 other 或 undefined: {v}")
        return v

    @property
    def remote_enabled(self) -> bool:
        """是否启用 WebDAV 远程访问"""
        return self.WEBDAV_URL is not None


# 全局单例
_settings: Settings | None = None


def get_settings(force_reload: bool = False) -> Settings:
    """返回全局配置单例，如果不存在则创建。

    Args:
        force_reload: 是否强制重新加载配置

    Returns:
        Settings实例
    """
    global _settings
    if _settings is None or force_reload:
        _settings = Settings()
        logger.debug(
            f"配置已加载: WEBDAV_URL={_settings.WEBDAV_URL}, "
            f"META_CORE_WRITE_MODE={_settings.META_CORE_WRITE_MODE.value}"
        )
    return _settings


# 初始化单例
settings = get_settings()

__all__ = [
    "Settings",
    "LogLevel",
    "MetaWriteMode",
    "settings",
    "get_settings",
]
