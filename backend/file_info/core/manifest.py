"""插件清单

编排系统通过 GET /manifest 读取。priority=10 且无依赖，
保证 file-info 排在处理链最前面，后续插件可以直接使用这里写入的字段。
"""

from .schemas import PluginManifest, SchemaField

PLUGIN_ID = "file-info"
PLUGIN_VERSION = "1.0.0"

MANIFEST = PluginManifest(
    id=PLUGIN_ID,
    name="File Information",
    version=PLUGIN_VERSION,
    description="Extracts basic file information (type, MIME, size)",
    author="MetaMesh",
    dependencies=[],
    priority=10,
    color="#607D8B",
    default_queue="fast",
    timeout=30000,
    schema={
        "fileType": SchemaField(label="File Type"),
        "mimeType": SchemaField(label="MIME Type"),
        "sizeByte": SchemaField(label="Size (bytes)", type="number"),
        "fileName": SchemaField(label="File Name"),
        "extension": SchemaField(label="Extension"),
        "filePath": SchemaField(label="File Path"),
    },
    config={},
)

__all__ = ["MANIFEST", "PLUGIN_ID", "PLUGIN_VERSION"]
