from __future__ import annotations

import io
from typing import Callable

import fitz
import pytest

from docassembler.domain.models import UploadCandidate


class CountingSource:
    def __init__(self, content: bytes) -> None:
        self.content = content
        self.reads = 0

    def getvalue(self) -> bytes:
        self.reads += 1
        return self.content


def build_pdf(labels: list[str]) -> bytes:
    document = fitz.open()
    try:
        for text in labels:
            page = document.new_page()
            page.insert_text((72, 72), text)
        return document.tobytes(deflate=True, garbage=3)
    finally:
        document.close()


def read_page_sizes(pdf_bytes: bytes) -> list[tuple[float, float]]:
    with fitz.open(stream=pdf_bytes, filetype="pdf") as document:
        return [(page.rect.width, page.rect.height) for page in document]


def build_image(width: int, height: int, output: str) -> bytes:
    pixmap = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, width, height), False)
    pixmap.clear_with(180)
    if output == "jpeg":
        return pixmap.tobytes("jpeg", jpg_quality=85)
    return pixmap.tobytes("png")


def make_candidate(name: str, mime_type: str, content: bytes) -> UploadCandidate:
    return UploadCandidate(
        name=name,
        mime_type=mime_type,
        size_bytes=len(content),
        source=io.BytesIO(content),
    )


@pytest.fixture
def three_page_pdf_bytes() -> bytes:
    return build_pdf(["A page 1", "A page 2", "A page 3"])


@pytest.fixture
def two_page_pdf_bytes() -> bytes:
    return build_pdf(["B page 1", "B page 2"])


@pytest.fixture
def png_bytes() -> bytes:
    return build_image(800, 600, "png")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return build_image(320, 240, "jpeg")


@pytest.fixture
def candidate_factory() -> Callable[[str, str, bytes], UploadCandidate]:
    return make_candidate


@pytest.fixture
def pdf_factory() -> Callable[[list[str]], bytes]:
    return build_pdf


@pytest.fixture
def image_factory() -> Callable[[int, int, str], bytes]:
    return build_image


@pytest.fixture
def counting_source_factory() -> Callable[[bytes], CountingSource]:
    return CountingSource


@pytest.fixture
def page_sizes() -> Callable[[bytes], list[tuple[float, float]]]:
    return read_page_sizes
