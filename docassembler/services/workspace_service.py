from __future__ import annotations

import logging
import uuid
from typing import Sequence

from docassembler.domain.errors import InvalidInputError, ValidationError
from docassembler.domain.models import (
    Direction,
    IntakeResult,
    MimeKind,
    StagedFile,
    StagedImage,
    StagedPdf,
    UploadCandidate,
)
from docassembler.infrastructure.config import AppConfig

logger = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = "Please drop valid PDF or Image (JPG, PNG) files."


def stage_candidate(candidate: UploadCandidate) -> StagedFile | None:
    """Wrap an accepted candidate in its staged variant; None if its MIME type is not accepted."""
    kind = MimeKind.from_mime_type(candidate.mime_type)
    if kind is None:
        return None
    file_id = uuid.uuid4().hex
    if kind == MimeKind.PDF:
        return StagedPdf(
            file_id=file_id,
            name=candidate.name,
            size_bytes=candidate.size_bytes,
            source=candidate.source,
        )
    return StagedImage(
        file_id=file_id,
        name=candidate.name,
        size_bytes=candidate.size_bytes,
        kind=kind,
        source=candidate.source,
    )


class WorkspaceService:
    def __init__(self, config: AppConfig) -> None:
        self.config = config

    @staticmethod
    def partition(
        candidates: Sequence[UploadCandidate],
    ) -> tuple[list[UploadCandidate], list[UploadCandidate]]:
        accepted: list[UploadCandidate] = []
        rejected: list[UploadCandidate] = []
        for candidate in candidates:
            if MimeKind.from_mime_type(candidate.mime_type) is None:
                rejected.append(candidate)
            else:
                accepted.append(candidate)
        return accepted, rejected

    def _check_limits(
        self, files: Sequence[StagedFile], accepted: Sequence[UploadCandidate]
    ) -> None:
        for candidate in accepted:
            if candidate.size_bytes > self.config.max_file_size_bytes:
                raise ValidationError(
                    f"{candidate.name} exceeds per-file limit of {self.config.max_file_size_mb} MB"
                )
        total_size = sum(item.size_bytes for item in files) + sum(
            candidate.size_bytes for candidate in accepted
        )
        if total_size > self.config.max_batch_size_bytes:
            raise ValidationError(
                f"Staged files exceed total limit of {self.config.max_batch_size_mb} MB"
            )

    def stage_files(
        self, files: Sequence[StagedFile], candidates: Sequence[UploadCandidate]
    ) -> IntakeResult:
        accepted, rejected = self.partition(candidates)
        if not accepted:
            logger.info("Rejected batch of %d file(s): no accepted types", len(rejected))
            raise InvalidInputError(INVALID_INPUT_MESSAGE)

        self._check_limits(files, accepted)

        staged: list[StagedFile] = []
        for candidate in accepted:
            item = stage_candidate(candidate)
            if item is not None:
                staged.append(item)

        skipped_names = [candidate.name for candidate in rejected]
        if skipped_names:
            logger.info("Skipped unsupported file(s): %s", ", ".join(skipped_names))
        logger.info("Staged %d file(s)", len(staged))
        return IntakeResult(
            files=tuple(files) + tuple(staged),
            accepted=staged,
            skipped_names=skipped_names,
        )

    @staticmethod
    def move_adjacent(
        files: Sequence[StagedFile], index: int, direction: Direction
    ) -> tuple[StagedFile, ...]:
        reordered = list(files)
        target = index - 1 if direction == Direction.UP else index + 1
        if not (0 <= index < len(reordered)) or not (0 <= target < len(reordered)):
            return tuple(reordered)
        reordered[index], reordered[target] = reordered[target], reordered[index]
        return tuple(reordered)

    @staticmethod
    def remove_file(files: Sequence[StagedFile], file_id: str) -> tuple[StagedFile, ...]:
        return tuple(item for item in files if item.file_id != file_id)

    @staticmethod
    def clear() -> tuple[StagedFile, ...]:
        return ()
