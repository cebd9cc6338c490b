from __future__ import annotations

import logging
import os
from dataclasses import dataclass


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _get_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


def _get_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _get_log_level_env(name: str, default: str) -> str:
    value = _get_str_env(name, default).upper()
    if isinstance(logging.getLevelName(value), int):
        return value
    return default


# Merged PDFs are sent to the browser base64-encoded in one message, which
# Streamlit caps at 200 MB by default (server.maxMessageSize).
MAX_INLINE_DOWNLOAD_MB = 140


def _get_batch_limit_env(name: str, default: int) -> int:
    return min(_get_int_env(name, default), MAX_INLINE_DOWNLOAD_MB)


@dataclass(frozen=True)
class AppConfig:
    max_file_size_mb: int = _get_int_env("DOCASSEMBLER_MAX_FILE_MB", 50)
    max_batch_size_mb: int = _get_batch_limit_env("DOCASSEMBLER_MAX_BATCH_MB", 100)
    output_name: str = _get_str_env("DOCASSEMBLER_OUTPUT_NAME", "merged_document.pdf")
    error_dismiss_seconds: int = _get_int_env("DOCASSEMBLER_ERROR_DISMISS_SECONDS", 3)
    native_save_dialog: bool = _get_bool_env("DOCASSEMBLER_NATIVE_SAVE_DIALOG", False)
    report_skipped_files: bool = _get_bool_env("DOCASSEMBLER_REPORT_SKIPPED", False)
    log_level: str = _get_log_level_env("DOCASSEMBLER_LOG_LEVEL", "INFO")

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    @property
    def max_batch_size_bytes(self) -> int:
        return self.max_batch_size_mb * 1024 * 1024
