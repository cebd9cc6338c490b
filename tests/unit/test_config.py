import pytest

from docassembler.domain.models import MimeKind, Notice
from docassembler.infrastructure.config import (
    MAX_INLINE_DOWNLOAD_MB,
    AppConfig,
    _get_batch_limit_env,
    _get_bool_env,
    _get_int_env,
    _get_log_level_env,
)


@pytest.mark.unit
def test_int_env_falls_back_on_invalid_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCASSEMBLER_TEST_INT", "abc")
    assert _get_int_env("DOCASSEMBLER_TEST_INT", 7) == 7
    monkeypatch.setenv("DOCASSEMBLER_TEST_INT", "-2")
    assert _get_int_env("DOCASSEMBLER_TEST_INT", 7) == 7
    monkeypatch.setenv("DOCASSEMBLER_TEST_INT", "12")
    assert _get_int_env("DOCASSEMBLER_TEST_INT", 7) == 12


@pytest.mark.unit
def test_bool_env_parsing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCASSEMBLER_TEST_BOOL", "Yes")
    assert _get_bool_env("DOCASSEMBLER_TEST_BOOL", False) is True
    monkeypatch.setenv("DOCASSEMBLER_TEST_BOOL", "off")
    assert _get_bool_env("DOCASSEMBLER_TEST_BOOL", True) is False
    monkeypatch.setenv("DOCASSEMBLER_TEST_BOOL", "maybe")
    assert _get_bool_env("DOCASSEMBLER_TEST_BOOL", True) is True
    monkeypatch.delenv("DOCASSEMBLER_TEST_BOOL")
    assert _get_bool_env("DOCASSEMBLER_TEST_BOOL", False) is False


@pytest.mark.unit
def test_log_level_env_rejects_unknown_levels(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCASSEMBLER_TEST_LEVEL", "debug")
    assert _get_log_level_env("DOCASSEMBLER_TEST_LEVEL", "INFO") == "DEBUG"
    monkeypatch.setenv("DOCASSEMBLER_TEST_LEVEL", "chatty")
    assert _get_log_level_env("DOCASSEMBLER_TEST_LEVEL", "INFO") == "INFO"


@pytest.mark.unit
def test_config_limits_in_bytes() -> None:
    config = AppConfig(max_file_size_mb=2, max_batch_size_mb=3)
    assert config.max_file_size_bytes == 2 * 1024 * 1024
    assert config.max_batch_size_bytes == 3 * 1024 * 1024


@pytest.mark.unit
def test_mime_kind_lookup() -> None:
    assert MimeKind.from_mime_type("application/pdf") == MimeKind.PDF
    assert MimeKind.from_mime_type(" image/JPEG ") == MimeKind.JPEG
    assert MimeKind.from_mime_type("image/jpg") is None
    assert MimeKind.from_mime_type(None) is None
    assert MimeKind.PNG.mime_type == "image/png"


@pytest.mark.unit
def test_notice_without_expiry_is_sticky() -> None:
    assert Notice(level="error", text="x").is_active(10**9)
    assert not Notice(level="error", text="x", expires_at=5.0).is_active(5.0)


@pytest.mark.unit
def test_batch_limit_is_capped_for_inline_download(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DOCASSEMBLER_TEST_BATCH", raising=False)
    assert _get_batch_limit_env("DOCASSEMBLER_TEST_BATCH", 100) == 100
    monkeypatch.setenv("DOCASSEMBLER_TEST_BATCH", "500")
    assert _get_batch_limit_env("DOCASSEMBLER_TEST_BATCH", 100) == MAX_INLINE_DOWNLOAD_MB
    # base64 output of a full batch still fits a 200 MB message
    assert MAX_INLINE_DOWNLOAD_MB * 4 / 3 < 200
