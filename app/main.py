from __future__ import annotations

import base64
import json

import streamlit as st
import streamlit.components.v1 as components

from docassembler.adapters.pymupdf_adapter import PyMuPdfAdapter
from docassembler.domain.models import (
    AssemblerState,
    DeliveryMethod,
    DeliveryReceipt,
    Direction,
    MimeKind,
    StagedFile,
    UploadCandidate,
)
from docassembler.infrastructure.config import AppConfig
from docassembler.infrastructure.logging_setup import configure_logging
from docassembler.infrastructure.save_dialog import resolve_save_prompt
from docassembler.services.delivery_service import DeliveryService
from docassembler.services.merge_service import MergeService
from docassembler.services.session_service import SessionService
from docassembler.services.workspace_service import WorkspaceService


def _init_services() -> tuple[AppConfig, SessionService]:
    config = AppConfig()
    configure_logging(config.log_level)
    adapter = PyMuPdfAdapter()
    session_service = SessionService(
        config,
        WorkspaceService(config),
        MergeService(adapter, output_name=config.output_name),
        DeliveryService(resolve_save_prompt(config.native_save_dialog)),
    )
    return config, session_service


def _init_state() -> None:
    st.session_state.setdefault("assembler_state", AssemblerState())
    st.session_state.setdefault("uploader_token", 0)
    st.session_state.setdefault("pending_download", None)


def _state() -> AssemblerState:
    return st.session_state.assembler_state


def _commit(state: AssemblerState) -> None:
    st.session_state.assembler_state = state
    st.rerun()


def _auto_download_html(receipt: DeliveryReceipt) -> str:
    encoded = base64.b64encode(receipt.payload).decode("ascii")
    file_name = json.dumps(receipt.file_name)
    return (
        "<script>"
        f"const raw = atob('{encoded}');"
        "const bytes = new Uint8Array(raw.length);"
        "for (let i = 0; i < raw.length; i++) { bytes[i] = raw.charCodeAt(i); }"
        "const blob = new Blob([bytes], {type: 'application/pdf'});"
        "const url = URL.createObjectURL(blob);"
        "const link = document.createElement('a');"
        "link.href = url;"
        f"link.download = {file_name};"
        "document.body.appendChild(link);"
        "link.click();"
        "document.body.removeChild(link);"
        "setTimeout(() => URL.revokeObjectURL(url), 1000);"
        "</script>"
    )


def _kind_label(item: StagedFile) -> str:
    return "PDF" if item.kind == MimeKind.PDF else f"Image ({item.kind.value.upper()})"


def _render_notices(session_service: SessionService) -> None:
    state = _state()
    notice = session_service.visible_notice(state)
    if notice is not None:
        if notice.level == "warning":
            st.warning(notice.text)
        else:
            st.error(notice.text)
    elif state.success_message:
        st.success(state.success_message)


def _intake_section(config: AppConfig, session_service: SessionService) -> None:
    uploaded = st.file_uploader(
        (
            "Drag & drop PDF or image files here "
            f"(max {config.max_file_size_mb} MB each, {config.max_batch_size_mb} MB total)"
        ),
        type=["pdf", "jpg", "jpeg", "png"],
        accept_multiple_files=True,
        key=f"assembler_upload_{st.session_state.uploader_token}",
    )
    st.caption("Supports PDF, JPG, PNG. Files never leave this session.")

    if uploaded:
        candidates = [
            UploadCandidate(
                name=item.name,
                mime_type=item.type or "",
                size_bytes=item.size,
                source=item,
            )
            for item in uploaded
        ]
        state, _ = session_service.add_files(_state(), candidates)
        st.session_state.uploader_token += 1
        _commit(state)


def _file_list_section(session_service: SessionService) -> None:
    state = _state()
    files = state.files

    header_col, clear_col = st.columns([4, 1])
    with header_col:
        st.subheader(f"Files to Merge ({len(files)})", anchor=False)
    with clear_col:
        if files and st.button("Clear All", key="clear_all", disabled=state.processing):
            _commit(session_service.clear(state))

    if not files:
        st.info("No files selected yet")
        return

    for index, item in enumerate(files):
        info_col, up_col, down_col, remove_col = st.columns([6, 1, 1, 1])
        with info_col:
            st.markdown(f"**{item.name}**")
            st.caption(f"{_kind_label(item)} • {item.size_mib} MB")
        with up_col:
            if st.button(
                "↑",
                key=f"move_up_{item.file_id}",
                disabled=index == 0 or state.processing,
                help="Move Up",
            ):
                _commit(session_service.move(state, index, Direction.UP))
        with down_col:
            if st.button(
                "↓",
                key=f"move_down_{item.file_id}",
                disabled=index == len(files) - 1 or state.processing,
                help="Move Down",
            ):
                _commit(session_service.move(state, index, Direction.DOWN))
        with remove_col:
            if st.button(
                "✕",
                key=f"remove_{item.file_id}",
                disabled=state.processing,
                help="Remove File",
            ):
                _commit(session_service.remove(state, item.file_id))


def _merge_section(session_service: SessionService) -> None:
    state = _state()

    if state.processing:
        with st.spinner("Merging..."):
            state, result = session_service.finish_merge(state)
        if result.receipt is not None and result.receipt.method == DeliveryMethod.DOWNLOAD:
            st.session_state.pending_download = result.receipt
        _commit(state)

    if st.button(
        "Merge & Save PDF",
        type="primary",
        disabled=not state.files or state.processing,
        use_container_width=True,
    ):
        _commit(session_service.start_merge(state))

    receipt: DeliveryReceipt | None = st.session_state.pending_download
    if receipt is not None:
        st.session_state.pending_download = None
        components.html(_auto_download_html(receipt), height=0)


def main() -> None:
    st.set_page_config(page_title="PDF & Image Merger", layout="centered")
    st.title("PDF & Image Merger", anchor=False)
    st.caption("Combine PDFs and images into one file. Processing stays in this session.")

    config, session_service = _init_services()
    _init_state()

    _intake_section(config, session_service)
    refresh = session_service.notice_refresh_seconds(_state())
    st.fragment(_render_notices, run_every=refresh)(session_service)
    st.divider()
    _file_list_section(session_service)
    st.divider()
    _merge_section(session_service)


if __name__ == "__main__":
    main()
