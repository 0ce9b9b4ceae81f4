"""Core module exports

file-info 插件的核心模块，不包含任何 I/O。

主要模块：
- classifier: 扩展名 / 魔数 文件类型识别
- models: 枚举与轻量数据结构
- schemas: 对外交换的 Pydantic 模型
- manifest: 插件清单
"""
