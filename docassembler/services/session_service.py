from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Callable, Sequence

from docassembler.domain.errors import DocAssemblerError, InvalidInputError
from docassembler.domain.models import (
    AssemblerState,
    Direction,
    Notice,
    OperationMessage,
    OperationResult,
    Status,
    UploadCandidate,
)
from docassembler.infrastructure.config import AppConfig
from docassembler.services.delivery_service import DeliveryService
from docassembler.services.merge_service import EMPTY_SELECTION_MESSAGE, MergeService
from docassembler.services.workspace_service import WorkspaceService

logger = logging.getLogger(__name__)

DELIVERY_FAILED_MESSAGE = "The merged PDF could not be delivered. Please try again."


class SessionService:
    """State transitions for one assembler session.

    Every method takes the current ``AssemblerState`` and returns a new one;
    nothing is mutated in place. Domain errors raised by the underlying
    services are turned into a ``Notice`` on the returned state, so the UI
    only ever renders a snapshot.
    """

    def __init__(
        self,
        config: AppConfig,
        workspace_service: WorkspaceService,
        merge_service: MergeService,
        delivery_service: DeliveryService,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.workspace_service = workspace_service
        self.merge_service = merge_service
        self.delivery_service = delivery_service
        self.clock = clock

    def visible_notice(self, state: AssemblerState) -> Notice | None:
        if state.notice is None or not state.notice.is_active(self.clock()):
            return None
        return state.notice

    def notice_refresh_seconds(self, state: AssemblerState) -> float | None:
        """Polling interval that lets the UI drop an expiring notice on time."""
        notice = self.visible_notice(state)
        if notice is None or notice.expires_at is None:
            return None
        return 1.0

    def add_files(
        self, state: AssemblerState, candidates: Sequence[UploadCandidate]
    ) -> tuple[AssemblerState, OperationResult]:
        cleared = replace(state, notice=None, success_message="")
        try:
            intake = self.workspace_service.stage_files(state.files, candidates)
        except InvalidInputError as exc:
            notice = Notice(
                level="error",
                text=str(exc),
                expires_at=self.clock() + self.config.error_dismiss_seconds,
            )
            return replace(state, notice=notice), OperationResult(
                status=Status.ERROR, messages=[OperationMessage(level="error", text=str(exc))]
            )
        except DocAssemblerError as exc:
            return replace(cleared, notice=Notice(level="error", text=str(exc))), OperationResult(
                status=Status.ERROR, messages=[OperationMessage(level="error", text=str(exc))]
            )

        messages = [OperationMessage(level="info", text=f"Added {len(intake.accepted)} file(s).")]
        status = Status.SUCCESS
        notice = None
        if intake.skipped_names:
            skipped_text = "Skipped unsupported file(s): " + ", ".join(intake.skipped_names)
            messages.append(OperationMessage(level="warning", text=skipped_text))
            status = Status.WARNING
            if self.config.report_skipped_files:
                notice = Notice(level="warning", text=skipped_text)

        return replace(cleared, files=intake.files, notice=notice), OperationResult(
            status=status,
            messages=messages,
            metrics={"added": len(intake.accepted), "skipped": len(intake.skipped_names)},
        )

    def move(self, state: AssemblerState, index: int, direction: Direction) -> AssemblerState:
        return replace(
            state, files=self.workspace_service.move_adjacent(state.files, index, direction)
        )

    def remove(self, state: AssemblerState, file_id: str) -> AssemblerState:
        return replace(state, files=self.workspace_service.remove_file(state.files, file_id))

    def clear(self, state: AssemblerState) -> AssemblerState:
        return replace(state, files=self.workspace_service.clear(), success_message="")

    def start_merge(self, state: AssemblerState) -> AssemblerState:
        if state.processing:
            return state
        if not state.files:
            return replace(
                state,
                notice=Notice(level="error", text=EMPTY_SELECTION_MESSAGE),
                success_message="",
            )
        return replace(state, processing=True, notice=None, success_message="")

    def finish_merge(self, state: AssemblerState) -> tuple[AssemblerState, OperationResult]:
        idle = replace(state, processing=False)
        try:
            merged = self.merge_service.assemble(state.files)
        except DocAssemblerError as exc:
            return replace(idle, notice=Notice(level="error", text=str(exc))), OperationResult(
                status=Status.ERROR, messages=[OperationMessage(level="error", text=str(exc))]
            )

        try:
            receipt = self.delivery_service.deliver(merged.output_pdf, merged.output_name)
        except Exception:
            logger.exception("Delivery of %s failed", merged.output_name)
            return replace(
                idle, notice=Notice(level="error", text=DELIVERY_FAILED_MESSAGE)
            ), OperationResult(
                status=Status.ERROR,
                messages=[OperationMessage(level="error", text=DELIVERY_FAILED_MESSAGE)],
            )

        return replace(idle, notice=None, success_message=receipt.message), OperationResult(
            status=Status.SUCCESS,
            messages=[OperationMessage(level="info", text=receipt.message)],
            metrics={
                "pages": merged.page_count,
                "sources": merged.source_count,
                "method": receipt.method.value,
            },
            receipt=receipt,
        )

    def merge(self, state: AssemblerState) -> tuple[AssemblerState, OperationResult]:
        if state.processing:
            return state, OperationResult(
                status=Status.WARNING,
                messages=[OperationMessage(level="warning", text="A merge is already running.")],
            )
        started = self.start_merge(state)
        if not started.processing:
            text = started.notice.text if started.notice else EMPTY_SELECTION_MESSAGE
            return started, OperationResult(
                status=Status.ERROR, messages=[OperationMessage(level="error", text=text)]
            )
        return self.finish_merge(started)
