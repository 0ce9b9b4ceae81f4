"""文件类型识别 (classifier.py) 的单元测试"""

import pytest

from file_info.core.classifier import (
    DEFAULT_MIME_TYPE,
    TypeClassifier,
    classify_by_content,
    classify_by_extension,
    classify_by_mime,
    mime_type_from_extension,
    normalize_extension,
)
from file_info.core.models import FileCategory


@pytest.mark.parametrize(
    "extension, expected",
    [
        ("mkv", FileCategory.VIDEO),
        ("MKV", FileCategory.VIDEO),
        ("mp4", FileCategory.VIDEO),
        ("mp3", FileCategory.AUDIO),
        ("Flac", FileCategory.AUDIO),
        ("txt", FileCategory.DOCUMENT),
        ("pdf", FileCategory.DOCUMENT),
        ("srt", FileCategory.SUBTITLE),
        ("ASS", FileCategory.SUBTITLE),
        ("torrent", FileCategory.TORRENT),
        ("zip", FileCategory.ARCHIVE),
        ("7z", FileCategory.ARCHIVE),
        (".mkv", FileCategory.VIDEO),
    ],
)
def test_classify_by_extension_known(extension, expected):
    """已知扩展名返回对应分类，大小写与前导点不影响结果"""
    assert classify_by_extension(extension) == expected


@pytest.mark.parametrize("extension", ["xyz", "", None, "   "])
def test_classify_by_extension_unknown_returns_default(extension):
    """未知或空扩展名返回兜底分类，而不是抛出异常或返回空值"""
    assert classify_by_extension(extension) == FileCategory.OTHER
    assert classify_by_extension(extension, FileCategory.UNDEFINED) == FileCategory.UNDEFINED


def test_images_fold_into_document_by_default():
    """默认策略下图片归入 document，开启独立图片类型后返回 image"""
    assert classify_by_extension("jpg") == FileCategory.DOCUMENT
    assert classify_by_extension("jpg", separate_images=True) == FileCategory.IMAGE


def test_normalize_extension():
    assert normalize_extension(" .MKV ") == "mkv"
    assert normalize_extension(None) == ""


@pytest.mark.parametrize(
    "mime_type, expected",
    [
        ("video/x-matroska", FileCategory.VIDEO),
        ("audio/mpeg", FileCategory.AUDIO),
        ("application/pdf", FileCategory.DOCUMENT),
        ("text/plain; charset=utf-8", FileCategory.DOCUMENT),
        ("application/x-subrip", FileCategory.SUBTITLE),
        ("application/x-bittorrent", FileCategory.TORRENT),
        ("application/zip", FileCategory.ARCHIVE),
        ("image/png", FileCategory.DOCUMENT),
    ],
)
def test_classify_by_mime(mime_type, expected):
    assert classify_by_mime(mime_type) == expected


@pytest.mark.parametrize("mime_type", [None, "", DEFAULT_MIME_TYPE, "chemical/x-xyz"])
def test_classify_by_mime_unknown(mime_type):
    assert classify_by_mime(mime_type) is None


def test_mime_type_from_extension():
    assert mime_type_from_extension("MKV") == "video/x-matroska"
    assert mime_type_from_extension("txt") == "text/plain"
    assert mime_type_from_extension("srt") == "application/x-subrip"
    assert mime_type_from_extension("torrent") == "application/x-bittorrent"
    assert mime_type_from_extension("") is None
    assert mime_type_from_extension("qqqzz") is None


def test_classify_by_content_detects_png(png_header):
    """魔数检测识别 PNG 文件头"""
    assert classify_by_content(png_header) == "image/png"


def test_classify_by_content_detects_pdf():
    assert classify_by_content(b"%PDF-1.7\n%\xe2\xe3\xcf\xd3\n" + b"0" * 300) == "application/pdf"


@pytest.mark.parametrize("data", [b"", None, b"This is a text file", b"fake video content"])
def test_classify_by_content_no_match_returns_none(data):
    """没有匹配的签名时返回 None，由调用方回退到扩展名"""
    assert classify_by_content(data) is None


class TestTypeClassifier:
    """测试带策略的 TypeClassifier"""

    def test_extension_wins_over_mime_for_category(self):
        """扩展名匹配时 MIME 类型不会覆盖分类"""
        classifier = TypeClassifier()
        assert classifier.category_for("mkv", "image/png") == FileCategory.VIDEO
        assert classifier.category_for("txt", "image/png") == FileCategory.DOCUMENT

    def test_mime_used_when_extension_unknown(self):
        classifier = TypeClassifier()
        assert classifier.category_for("xyz", "application/pdf") == FileCategory.DOCUMENT
        assert classifier.category_for("", "video/mp4") == FileCategory.VIDEO

    def test_mime_fallback_disabled(self):
        classifier = TypeClassifier(mime_fallback=False)
        assert classifier.category_for("xyz", "application/pdf") == FileCategory.OTHER

    def test_fallback_category(self):
        assert TypeClassifier().category_for("xyz") == FileCategory.OTHER
        undefined = TypeClassifier(fallback=FileCategory.UNDEFINED)
        assert undefined.category_for("xyz") == FileCategory.UNDEFINED
        assert undefined.category_for("xyz", DEFAULT_MIME_TYPE) == FileCategory.UNDEFINED

    def test_invalid_fallback_rejected(self):
        with pytest.raises(ValueError):
            TypeClassifier(fallback=FileCategory.VIDEO)

    def test_separate_images(self):
        classifier = TypeClassifier(separate_images=True)
        assert classifier.category_for("png") == FileCategory.IMAGE
        assert classifier.category_for("xyz", "image/webp") == FileCategory.IMAGE

    def test_mime_type_precedence(self):
        """魔数检测结果 > 扩展名查表 > application/octet-stream"""
        classifier = TypeClassifier()
        assert classifier.mime_type_for("txt", "image/png") == "image/png"
        assert classifier.mime_type_for("txt", None) == "text/plain"
        assert classifier.mime_type_for("qqqzz", None) == DEFAULT_MIME_TYPE
        assert classifier.mime_type_for("", None) == DEFAULT_MIME_TYPE

    def test_from_settings(self, test_settings):
        settings = test_settings.model_copy(update={
            "FALLBACK_FILE_TYPE": "undefined",
            "SEPARATE_IMAGE_CATEGORY": True,
            "MIME_CATEGORY_FALLBACK": False,
        })
        classifier = TypeClassifier.from_settings(settings)
        assert classifier.fallback == FileCategory.UNDEFINED
        assert classifier.separate_images is True
        assert classifier.mime_fallback is False
