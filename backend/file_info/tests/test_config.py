"""配置模块测试用例"""

import pytest
from pydantic import ValidationError

from file_info import config as cfg
from file_info.core.classifier import MIN_SNIFF_BYTES

ENV_VARS = [
    "WEBDAV_URL",
    "WEBDAV_PATH_PREFIX",
    "FALLBACK_FILE_TYPE",
    "SNIFF_BYTES",
    "META_CORE_WRITE_MODE",
    "MAX_CONCURRENT_TASKS",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """在没有 .env 文件的临时目录中运行，并清除相关环境变量"""
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def test_defaults():
    """
    Given: 没有任何环境变量和 .env 文件
    When: Settings 类被实例化
    Then: 使用本地文件访问，其余字段为默认值
    """
    settings = cfg.Settings()

    assert settings.WEBDAV_URL is None
    assert settings.remote_enabled is False
    assert settings.WEBDAV_PATH_PREFIX == "/files"
    assert settings.FALLBACK_FILE_TYPE == "other"
    assert settings.SNIFF_BYTES == 4096
    assert settings.META_CORE_WRITE_MODE == cfg.MetaWriteMode.MERGE
    assert settings.MAX_CONCURRENT_TASKS == 0
    assert settings.LOG_LEVEL == cfg.LogLevel.INFO


def test_webdav_url_from_env(monkeypatch):
    monkeypatch.setenv("WEBDAV_URL", "http://meta-sort-dev/webdav")

    settings = cfg.Settings()

    assert settings.WEBDAV_URL == "http://meta-sort-dev/webdav"
    assert settings.remote_enabled is True


@pytest.mark.parametrize("value", ["", "   "])
def test_empty_webdav_url_means_local(monkeypatch, value):
    monkeypatch.setenv("WEBDAV_URL", value)

    assert cfg.Settings().remote_enabled is False


def test_invalid_webdav_url():
    with pytest.raises(ValidationError):
        cfg.Settings(WEBDAV_URL="ftp://meta-sort-dev/webdav")


def test_path_prefix_normalized():
    assert cfg.Settings(WEBDAV_PATH_PREFIX="/media/").WEBDAV_PATH_PREFIX == "/media"
    assert cfg.Settings(WEBDAV_PATH_PREFIX="/").WEBDAV_PATH_PREFIX == "/"

    with pytest.raises(ValidationError):
        cfg.Settings(WEBDAV_PATH_PREFIX="media")


def test_fallback_file_type():
    assert cfg.Settings(FALLBACK_FILE_TYPE=" Undefined ").FALLBACK_FILE_TYPE == "undefined"

    with pytest.raises(ValidationError):
        cfg.Settings(FALLBACK_FILE_TYPE="video")


@pytest.mark.parametrize("value", [100, 2 * 1024 * 1024])
def test_sniff_bytes_bounds(value):
    with pytest.raises(ValidationError):
        cfg.Settings(SNIFF_BYTES=value)


def test_sniff_bytes_minimum_matches_classifier():
    assert cfg.Settings(SNIFF_BYTES=MIN_SNIFF_BYTES).SNIFF_BYTES == MIN_SNIFF_BYTES

    with pytest.raises(ValidationError):
        cfg.Settings(SNIFF_BYTES=MIN_SNIFF_BYTES - 1)


def test_load_from_env_file(isolated_env):
    """
    Given: 当前目录下的 .env 文件
    When: Settings 类被实例化
    Then: 字段取自 .env 文件
    """
    (isolated_env / ".env").write_text(
        "WEBDAV_URL=https://dav.example.com/webdav\n"
        "META_CORE_WRITE_MODE=per_field\n"
        "MAX_CONCURRENT_TASKS=4\n"
        "LOG_LEVEL=DEBUG\n"
    )

    settings = cfg.Settings()

    assert settings.WEBDAV_URL == "https://dav.example.com/webdav"
    assert settings.META_CORE_WRITE_MODE == cfg.MetaWriteMode.PER_FIELD
    assert settings.MAX_CONCURRENT_TASKS == 4
    assert settings.LOG_LEVEL == cfg.LogLevel.DEBUG


def test_get_settings_singleton(monkeypatch):
    monkeypatch.setattr(cfg, "_settings", None)

    first = cfg.get_settings()
    assert cfg.get_settings() is first

    monkeypatch.setenv("MAX_CONCURRENT_TASKS", "2")
    reloaded = cfg.get_settings(force_reload=True)

    assert reloaded is not first
    assert reloaded.MAX_CONCURRENT_TASKS == 2
