from __future__ import annotations

import logging
from typing import Sequence

from docassembler.adapters.pymupdf_adapter import PyMuPdfAdapter
from docassembler.domain.errors import AssemblyError, EmptySelectionError
from docassembler.domain.models import MergeResult, StagedFile, StagedImage, StagedPdf

logger = logging.getLogger(__name__)

EMPTY_SELECTION_MESSAGE = "Please select at least 1 file to generate a PDF."
ASSEMBLY_FAILED_MESSAGE = "An error occurred while merging. Ensure files are not corrupted."


class MergeService:
    def __init__(self, adapter: PyMuPdfAdapter, output_name: str = "merged_document.pdf") -> None:
        self.adapter = adapter
        self.output_name = output_name

    def assemble(self, files: Sequence[StagedFile]) -> MergeResult:
        if not files:
            raise EmptySelectionError(EMPTY_SELECTION_MESSAGE)

        output = self.adapter.new_document()
        try:
            for position, staged in enumerate(files, start=1):
                content = staged.source.getvalue()
                if isinstance(staged, StagedPdf):
                    copied = self.adapter.append_pdf(output, content)
                    logger.debug(
                        "[%d/%d] copied %d page(s) from %s",
                        position,
                        len(files),
                        copied,
                        staged.name,
                    )
                elif isinstance(staged, StagedImage):
                    self.adapter.append_image(output, content, staged.kind)
                    logger.debug("[%d/%d] embedded image %s", position, len(files), staged.name)
                else:
                    raise TypeError(f"Unsupported staged file: {staged!r}")

            page_count = int(output.page_count)
            output_pdf = self.adapter.to_bytes(output)
        except Exception as exc:
            logger.exception("Merge of %d file(s) failed", len(files))
            raise AssemblyError(ASSEMBLY_FAILED_MESSAGE) from exc
        finally:
            output.close()

        logger.info("Merged %d file(s) into %d page(s)", len(files), page_count)
        return MergeResult(
            output_name=self.output_name,
            output_pdf=output_pdf,
            page_count=page_count,
            source_count=len(files),
        )
