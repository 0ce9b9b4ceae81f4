"""文件类型识别模块

根据扩展名和文件头魔数确定文件的粗分类（video/audio/document...）与 MIME 类型。
本模块不做任何 I/O，文件头字节由调用方读取后传入。

识别规则：
- fileType 以扩展名为准；扩展名无法识别时才参考 MIME 类型推断
- mimeType 优先使用魔数检测结果，其次按扩展名查表，最后兜底为 application/octet-stream

Example:
    >>> classifier = TypeClassifier()
    >>> classifier.category_for("MKV")
    <FileCategory.VIDEO: 'video'>
    >>> classifier.mime_type_for("txt", content_mime="image/png")
    'image/png'
"""

from __future__ import annotations

import mimetypes
from typing import Optional

import filetype
from loguru import logger

from .models import FileCategory

DEFAULT_MIME_TYPE = "application/octet-stream"

# 魔数检测所需的最小字节数，filetype 最多检查前 262 字节
MIN_SNIFF_BYTES = 262

# --------------------------------------------------------------------------
# 扩展名 -> 文件分类
# --------------------------------------------------------------------------
_CATEGORY_EXTENSIONS: dict[FileCategory, frozenset[str]] = {
    FileCategory.VIDEO: frozenset({
        "mkv", "mp4", "m4v", "avi", "mov", "wmv", "flv", "f4v", "webm",
        "mpg", "mpeg", "m2v", "ts", "m2ts", "mts", "vob", "3gp", "3g2",
        "ogv", "divx", "xvid", "rm", "rmvb", "asf",
    }),
    FileCategory.AUDIO: frozenset({
        "mp3", "flac", "aac", "m4a", "m4b", "ogg", "oga", "opus", "wav",
        "wma", "alac", "ape", "aiff", "aif", "mka", "dts", "ac3", "eac3",
        "mid", "midi", "wv",
    }),
    FileCategory.DOCUMENT: frozenset({
        "txt", "pdf", "doc", "docx", "odt", "rtf", "md", "epub", "mobi",
        "azw", "azw3", "djvu", "xls", "xlsx", "ods", "csv", "ppt", "pptx",
        "odp", "json", "xml", "html", "htm", "nfo", "log", "cbz", "cbr",
    }),
    FileCategory.SUBTITLE: frozenset({
        "srt", "ass", "ssa", "sub", "idx", "vtt", "sup", "smi", "sami",
        "sbv", "ttml", "dfxp", "lrc",
    }),
    FileCategory.TORRENT: frozenset({"torrent"}),
    FileCategory.ARCHIVE: frozenset({
        "zip", "rar", "7z", "tar", "gz", "tgz", "bz2", "tbz2", "xz", "txz",
        "zst", "lz", "lzma", "cab", "iso", "img", "dmg",
    }),
    FileCategory.IMAGE: frozenset({
        "jpg", "jpeg", "png", "gif", "bmp", "webp", "tif", "tiff", "svg",
        "heic", "heif", "avif", "ico", "raw", "cr2", "nef", "arw", "dng",
    }),
}

EXTENSION_CATEGORIES: dict[str, FileCategory] = {
    ext: category
    for category, extensions in _CATEGORY_EXTENSIONS.items()
    for ext in extensions
}

# --------------------------------------------------------------------------
# 扩展名 -> MIME 类型
# 标准库 mimetypes 缺少大部分影音/字幕/种子类型，且结果依赖系统的 mime.types，
# 常用扩展名在这里固定下来，其余再交给 mimetypes
# --------------------------------------------------------------------------
EXTENSION_MIME_TYPES: dict[str, str] = {
    # 视频
    "mkv": "video/x-matroska",
    "mp4": "video/mp4",
    "m4v": "video/x-m4v",
    "avi": "video/x-msvideo",
    "mov": "video/quicktime",
    "wmv": "video/x-ms-wmv",
    "flv": "video/x-flv",
    "webm": "video/webm",
    "mpg": "video/mpeg",
    "mpeg": "video/mpeg",
    "ts": "video/mp2t",
    "m2ts": "video/mp2t",
    "mts": "video/mp2t",
    "vob": "video/dvd",
    "3gp": "video/3gpp",
    "ogv": "video/ogg",
    "rmvb": "application/vnd.rn-realmedia-vbr",
    # 音频
    "mp3": "audio/mpeg",
    "flac": "audio/flac",
    "aac": "audio/aac",
    "m4a": "audio/mp4",
    "ogg": "audio/ogg",
    "opus": "audio/opus",
    "wav": "audio/wav",
    "wma": "audio/x-ms-wma",
    "mka": "audio/x-matroska",
    "aiff": "audio/aiff",
    "ape": "audio/ape",
    "mid": "audio/midi",
    "midi": "audio/midi",
    # 文档
    "txt": "text/plain",
    "md": "text/markdown",
    "pdf": "application/pdf",
    "epub": "application/epub+zip",
    "mobi": "application/x-mobipocket-ebook",
    "json": "application/json",
    "xml": "application/xml",
    "html": "text/html",
    "htm": "text/html",
    "csv": "text/csv",
    "nfo": "text/plain",
    "log": "text/plain",
    "cbz": "application/vnd.comicbook+zip",
    "cbr": "application/vnd.comicbook-rar",
    # 字幕
    "srt": "application/x-subrip",
    "ass": "text/x-ssa",
    "ssa": "text/x-ssa",
    "vtt": "text/vtt",
    "sub": "text/x-microdvd",
    "sup": "application/x-pgs",
    # 种子
    "torrent": "application/x-bittorrent",
    # 压缩包
    "zip": "application/zip",
    "rar": "application/vnd.rar",
    "7z": "application/x-7z-compressed",
    "tar": "application/x-tar",
    "gz": "application/gzip",
    "tgz": "application/gzip",
    "bz2": "application/x-bzip2",
    "xz": "application/x-xz",
    "zst": "application/zstd",
    "iso": "application/x-iso9660-image",
    # 图片
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "webp": "image/webp",
    "tif": "image/tiff",
    "tiff": "image/tiff",
    "svg": "image/svg+xml",
    "heic": "image/heic",
    "heif": "image/heif",
    "avif": "image/avif",
}

# --------------------------------------------------------------------------
# MIME 类型 -> 文件分类
# 先查精确表，再按主类型前缀匹配
# --------------------------------------------------------------------------
MIME_CATEGORIES: dict[str, FileCategory] = {
    "application/x-bittorrent": FileCategory.TORRENT,
    "application/x-subrip": FileCategory.SUBTITLE,
    "text/x-ssa": FileCategory.SUBTITLE,
    "text/vtt": FileCategory.SUBTITLE,
    "text/x-microdvd": FileCategory.SUBTITLE,
    "application/x-pgs": FileCategory.SUBTITLE,
    "application/zip": FileCategory.ARCHIVE,
    "application/vnd.rar": FileCategory.ARCHIVE,
    "application/x-rar-compressed": FileCategory.ARCHIVE,
    "application/x-7z-compressed": FileCategory.ARCHIVE,
    "application/x-tar": FileCategory.ARCHIVE,
    "application/gzip": FileCategory.ARCHIVE,
    "application/x-bzip2": FileCategory.ARCHIVE,
    "application/x-xz": FileCategory.ARCHIVE,
    "application/zstd": FileCategory.ARCHIVE,
    "application/x-lzip": FileCategory.ARCHIVE,
    "application/vnd.ms-cab-compressed": FileCategory.ARCHIVE,
    "application/x-iso9660-image": FileCategory.ARCHIVE,
    "application/pdf": FileCategory.DOCUMENT,
    "application/epub+zip": FileCategory.DOCUMENT,
    "application/x-mobipocket-ebook": FileCategory.DOCUMENT,
    "application/rtf": FileCategory.DOCUMENT,
    "application/msword": FileCategory.DOCUMENT,
    "application/vnd.ms-excel": FileCategory.DOCUMENT,
    "application/vnd.ms-powerpoint": FileCategory.DOCUMENT,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": FileCategory.DOCUMENT,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": FileCategory.DOCUMENT,
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": FileCategory.DOCUMENT,
    "application/vnd.oasis.opendocument.text": FileCategory.DOCUMENT,
    "application/json": FileCategory.DOCUMENT,
    "application/xml": FileCategory.DOCUMENT,
    "application/ogg": FileCategory.AUDIO,
    "application/vnd.rn-realmedia-vbr": FileCategory.VIDEO,
    "application/x-matroska": FileCategory.VIDEO,
}

MIME_PREFIX_CATEGORIES: tuple[tuple[str, FileCategory], ...] = (
    ("video/", FileCategory.VIDEO),
    ("audio/", FileCategory.AUDIO),
    ("image/", FileCategory.IMAGE),
    ("text/", FileCategory.DOCUMENT),
)


def normalize_extension(extension: Optional[str]) -> str:
    """统一扩展名格式：去空白、去前导点、转小写"""
    if not extension:
        return ""
    return extension.strip().lstrip(".").lower()


def _apply_image_policy(category: FileCategory, separate_images: bool) -> FileCategory:
    if category is FileCategory.IMAGE and not separate_images:
        return FileCategory.DOCUMENT
    return category


def lookup_extension_category(
    extension: Optional[str],
    *,
    separate_images: bool = False,
) -> Optional[FileCategory]:
    """按扩展名查表，未知扩展名返回 None"""
    category = EXTENSION_CATEGORIES.get(normalize_extension(extension))
    if category is None:
        return None
    return _apply_image_policy(category, separate_images)


def classify_by_extension(
    extension: Optional[str],
    default: FileCategory = FileCategory.OTHER,
    *,
    separate_images: bool = False,
) -> FileCategory:
    """根据扩展名返回文件分类，大小写不敏感

    Args:
        extension: 扩展名，可带或不带前导点
        default: 未知或空扩展名时返回的兜底分类
        separate_images: 图片是否作为独立分类

    Returns:
        FileCategory: 总是返回一个确定的分类，不会抛出异常
    """
    category = lookup_extension_category(extension, separate_images=separate_images)
    return category if category is not None else default


def classify_by_mime(
    mime_type: Optional[str],
    *,
    separate_images: bool = False,
) -> Optional[FileCategory]:
    """根据 MIME 类型推断文件分类，无法推断时返回 None"""
    if not mime_type:
        return None
    mime_type = mime_type.split(";", 1)[0].strip().lower()
    if mime_type == DEFAULT_MIME_TYPE:
        return None

    category = MIME_CATEGORIES.get(mime_type)
    if category is None:
        for prefix, prefix_category in MIME_PREFIX_CATEGORIES:
            if mime_type.startswith(prefix):
                category = prefix_category
                break
    if category is None:
        return None
    return _apply_image_policy(category, separate_images)


def mime_type_from_extension(extension: Optional[str]) -> Optional[str]:
    """根据扩展名查找 MIME 类型，未知时返回 None"""
    ext = normalize_extension(extension)
    if not ext:
        return None
    mime_type = EXTENSION_MIME_TYPES.get(ext)
    if mime_type:
        return mime_type
    guessed, _ = mimetypes.guess_type(f"file.{ext}", strict=False)
    return guessed


def classify_by_content(data: Optional[bytes]) -> Optional[str]:
    """通过文件头魔数检测 MIME 类型

    Args:
        data: 文件开头的若干字节，4 KiB 足以覆盖常见格式的签名

    Returns:
        Optional[str]: 检测到的 MIME 类型；没有匹配的签名时返回 None
    """
    if not data:
        return None
    try:
        kind = filetype.guess(bytes(data))
    except (TypeError, ValueError) as e:
        logger.debug(f"魔数检测失败: {e}")
        return None
    if kind is None:
        return None
    return kind.mime


class TypeClassifier:
    """带策略的文件类型识别器

    在进程启动时按配置创建一次，注入到任务处理器中。
    """

    def __init__(
        self,
        *,
        fallback: FileCategory = FileCategory.OTHER,
        separate_images: bool = False,
        mime_fallback: bool = True,
    ) -> None:
        if fallback not in (FileCategory.OTHER, FileCategory.UNDEFINED):
            raise ValueError(f"兜底分类只能是 other 或 undefined: {fallback}")
        self.fallback = fallback
        self.separate_images = separate_images
        self.mime_fallback = mime_fallback

    @classmethod
    def from_settings(cls, settings) -> "TypeClassifier":
        return cls(
            fallback=FileCategory(settings.FALLBACK_FILE_TYPE),
            separate_images=settings.SEPARATE_IMAGE_CATEGORY,
            mime_fallback=settings.MIME_CATEGORY_FALLBACK,
        )

    def sniff(self, data: Optional[bytes]) -> Optional[str]:
        return classify_by_content(data)

    def category_for(
        self,
        extension: Optional[str],
        mime_type: Optional[str] = None,
    ) -> FileCategory:
        """确定文件分类

        扩展名匹配时直接采用，MIME 类型不会覆盖扩展名结果；
        扩展名未知且允许 MIME 推断时才参考 mime_type。
        """
        category = lookup_extension_category(extension, separate_images=self.separate_images)
        if category is not None:
            return category

        if self.mime_fallback:
            category = classify_by_mime(mime_type, separate_images=self.separate_images)
            if category is not None:
                return category

        return self.fallback

    def mime_type_for(
        self,
        extension: Optional[str],
        content_mime: Optional[str] = None,
    ) -> str:
        """确定 MIME 类型：魔数检测 > 扩展名查表 > application/octet-stream"""
        if content_mime:
            return content_mime
        return mime_type_from_extension(extension) or DEFAULT_MIME_TYPE


__all__ = [
    "DEFAULT_MIME_TYPE",
    "MIN_SNIFF_BYTES",
    "EXTENSION_CATEGORIES",
    "EXTENSION_MIME_TYPES",
    "MIME_CATEGORIES",
    "TypeClassifier",
    "classify_by_content",
    "classify_by_extension",
    "classify_by_mime",
    "lookup_extension_category",
    "mime_type_from_extension",
    "normalize_extension",
]
