"""file-info 插件

MetaMesh 处理链中的第一个插件：提取文件类型、MIME 类型、大小、文件名和扩展名。
"""
