"""
插件管理API路由模块

提供编排系统使用的健康检查、插件清单和配置下发接口。
"""

from typing import Optional

from fastapi import APIRouter, Request
from loguru import logger

from ...core.manifest import MANIFEST, PLUGIN_VERSION
from ...core.schemas import ConfigureRequest, ConfigureResponse, HealthResponse


plugin_router = APIRouter(tags=["plugin"])


@plugin_router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """健康检查，ready 在启动完成后为 True、关闭过程中为 False"""
    return HealthResponse(
        status="healthy",
        ready=getattr(request.app.state, "ready", False),
        version=PLUGIN_VERSION,
    )


@plugin_router.get("/manifest")
async def get_manifest() -> dict:
    """返回插件清单"""
    return MANIFEST.model_dump(by_alias=True)


@plugin_router.post("/configure", response_model=ConfigureResponse, response_model_exclude_none=True)
async def configure(
    request: Request,
    body: Optional[ConfigureRequest] = None,
) -> ConfigureResponse:
    """
    接收编排系统下发的插件配置

    file-info 目前没有可配置项，配置只保存在 app.state.plugin_config 中。
    """
    try:
        request.app.state.plugin_config = dict(body.config or {}) if body else {}
        logger.info("插件配置已更新")
        return ConfigureResponse(status="ok")
    except Exception as e:
        logger.error(f"更新插件配置时发生错误: {e}")
        return ConfigureResponse(status="error", error=str(e))
