"""
Pydantic模型（Schemas）模块

定义插件与编排系统之间交换的数据结构：任务请求、回调结果、提取出的文件信息，
以及 health/configure/process 接口的响应模型。
对外统一使用 camelCase 字段名，Python 内部使用 snake_case 属性名。
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import FileCategory


class CamelModel(BaseModel):
    """对外 camelCase、对内 snake_case 的基类"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        """序列化为对外 JSON 结构，省略空字段"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# 提取出的文件信息
class FileFacts(CamelModel):
    file_type: FileCategory
    mime_type: Optional[str] = None
    size_byte: int = Field(ge=0)
    file_name: str
    extension: str = ""
    file_path: str

    def to_meta_fields(self) -> Dict[str, str]:
        """转换为写入 meta-core 的字段映射，所有值均为字符串"""
        payload = self.model_dump(by_alias=True, exclude_none=True)
        return {key: str(value) for key, value in payload.items()}


# 任务请求：taskId/cid/filePath/callbackUrl/metaCoreUrl 必填且不能为空
# 数字形式的 id 按字符串接收；existingMeta 为 null 时视为空字典
class TaskRequest(CamelModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    task_id: str = Field(min_length=1)
    cid: str = Field(min_length=1)
    file_path: str = Field(min_length=1)
    callback_url: str = Field(min_length=1)
    meta_core_url: str = Field(min_length=1)
    existing_meta: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("existing_meta", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return {} if v is None else v


# 任务结果（回调载荷）
class TaskOutcome(CamelModel):
    task_id: str
    status: Literal["completed", "failed", "skipped"]
    duration: int = Field(ge=0, description="耗时（毫秒）")
    error: Optional[str] = None
    metadata: Optional[FileFacts] = None


class ProcessResponse(BaseModel):
    status: Literal["accepted", "rejected"]
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    ready: bool
    version: str


class ConfigureRequest(BaseModel):
    config: Optional[Dict[str, Any]] = None


class ConfigureResponse(BaseModel):
    status: Literal["ok", "error"]
    error: Optional[str] = None


# 插件清单中的单个字段声明
class SchemaField(BaseModel):
    label: str
    type: Literal["string", "number"] = "string"
    readonly: bool = True


class PluginManifest(CamelModel):
    id: str
    name: str
    version: str
    description: str
    author: str
    dependencies: list[str] = Field(default_factory=list)
    priority: int
    color: str
    default_queue: str
    timeout: int = Field(description="编排侧单任务超时（毫秒）")
    schema_: Dict[str, SchemaField] = Field(alias="schema")
    config: Dict[str, Any] = Field(default_factory=dict)
