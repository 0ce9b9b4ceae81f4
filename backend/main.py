from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from loguru import logger

from file_info.config import settings
from file_info.api import router as api_router, tags_metadata
from file_info.core.classifier import TypeClassifier
from file_info.core.manifest import MANIFEST
from file_info.services.access import create_file_access
from file_info.services.metadata import create_sink_factory
from file_info.services.task import TaskDispatcher, TaskProcessor

# 配置日志
logger.remove()
logger.add(
    sink=lambda msg: print(msg, end=""),
    level=settings.LOG_LEVEL.value,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level}</level> | "
            "{extra} {message}"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"[{MANIFEST.id}] 插件启动，开始初始化...")
    app.state.ready = False
    app.state.plugin_config = {}

    # ------------------------------------------------------------------
    # 1) 共享 HTTP 客户端：WebDAV、meta-core、回调共用一个连接池
    #    各请求在调用处单独指定超时
    # ------------------------------------------------------------------
    http_client = httpx.AsyncClient(timeout=settings.REMOTE_TIMEOUT_SECONDS)

    # ------------------------------------------------------------------
    # 2) 文件访问方式只在这里选择一次，之后对所有任务只读
    # ------------------------------------------------------------------
    file_access = create_file_access(settings, http_client)
    classifier = TypeClassifier.from_settings(settings)
    processor = TaskProcessor(
        file_access,
        classifier,
        create_sink_factory(settings, http_client),
        sniff_bytes=settings.SNIFF_BYTES,
    )
    dispatcher = TaskDispatcher(
        processor,
        http_client,
        callback_timeout=settings.CALLBACK_TIMEOUT_SECONDS,
        max_concurrency=settings.MAX_CONCURRENT_TASKS,
    )

    app.state.http_client = http_client
    app.state.dispatcher = dispatcher
    app.state.ready = True
    logger.info(
        f"[{MANIFEST.id}] 初始化完成 - 文件访问: {file_access.name}, "
        f"兜底类型: {classifier.fallback}, 最大并发: {settings.MAX_CONCURRENT_TASKS or '不限制'}"
    )

    yield

    # Shutdown
    app.state.ready = False
    logger.info(f"[{MANIFEST.id}] 正在关闭...")
    try:
        await dispatcher.shutdown()
    finally:
        await http_client.aclose()
    logger.info(f"[{MANIFEST.id}] 已关闭")


app = FastAPI(
    title="file-info plugin",
    version=MANIFEST.version,
    lifespan=lifespan,
    openapi_tags=tags_metadata,
)

# 引入API路由
app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    logger.info(f"[{MANIFEST.id}] 监听 http://{settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.value.lower())
