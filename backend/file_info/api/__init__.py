"""file-info API 聚合器包

此包负责聚合各 endpoints 子模块的路由，并向外暴露统一的 `router` 变量，
供 `main.py` 及测试用例 `from file_info.api import router` 使用。
"""

from fastapi import APIRouter

from .endpoints.plugin import plugin_router
from .endpoints.process import process_router

# 创建聚合路由器
router = APIRouter()
router.include_router(plugin_router)
router.include_router(process_router)

# OpenAPI 标签元数据，供 FastAPI 应用在生成文档时使用
tags_metadata = [
    {
        "name": "plugin",
        "description": "插件管理接口：健康检查、插件清单、配置下发",
    },
    {
        "name": "process",
        "description": "任务接口：提交文件处理任务，结果通过回调返回",
    },
]

__all__ = ["router", "tags_metadata"]
