from __future__ import annotations

from typing import cast

import fitz  # type: ignore[import-untyped]

from docassembler.domain.errors import ParsingError
from docassembler.domain.models import MimeKind

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"


class PyMuPdfAdapter:
    @staticmethod
    def _optimized_bytes(document: fitz.Document) -> bytes:
        return cast(
            bytes,
            document.tobytes(
                garbage=4,
                clean=True,
                deflate=True,
                deflate_images=True,
                deflate_fonts=True,
            ),
        )

    @staticmethod
    def _check_signature(image_bytes: bytes, kind: MimeKind) -> None:
        if kind == MimeKind.PNG and not image_bytes.startswith(PNG_SIGNATURE):
            raise ParsingError("Image data is not a PNG")
        if kind == MimeKind.JPEG and not image_bytes.startswith(JPEG_SIGNATURE):
            raise ParsingError("Image data is not a JPEG")

    def new_document(self) -> fitz.Document:
        return fitz.open()

    def get_image_size(self, image_bytes: bytes) -> tuple[int, int]:
        try:
            pixmap = fitz.Pixmap(image_bytes)
            return int(pixmap.width), int(pixmap.height)
        except Exception as exc:
            raise ParsingError("Unable to decode image") from exc

    def append_pdf(self, output: fitz.Document, pdf_bytes: bytes) -> int:
        try:
            with fitz.open(stream=pdf_bytes, filetype="pdf") as source_doc:
                if source_doc.needs_pass:
                    raise ParsingError("PDF is password protected")
                output.insert_pdf(source_doc)
                return int(source_doc.page_count)
        except ParsingError:
            raise
        except Exception as exc:
            raise ParsingError("Unable to copy PDF pages") from exc

    def append_image(self, output: fitz.Document, image_bytes: bytes, kind: MimeKind) -> None:
        self._check_signature(image_bytes, kind)
        width, height = self.get_image_size(image_bytes)
        try:
            page = output.new_page(width=width, height=height)
            page.insert_image(fitz.Rect(0, 0, width, height), stream=image_bytes)
        except Exception as exc:
            raise ParsingError("Unable to embed image") from exc

    def to_bytes(self, output: fitz.Document) -> bytes:
        try:
            return self._optimized_bytes(output)
        except Exception as exc:
            raise ParsingError("Unable to serialize merged PDF") from exc
