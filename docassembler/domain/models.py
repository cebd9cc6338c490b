from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Protocol, Union


class Status(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class MimeKind(str, Enum):
    PDF = "pdf"
    JPEG = "jpeg"
    PNG = "png"

    @property
    def mime_type(self) -> str:
        return MIME_TYPES_BY_KIND[self]

    @classmethod
    def from_mime_type(cls, mime_type: str | None) -> "MimeKind | None":
        if not mime_type:
            return None
        return KINDS_BY_MIME_TYPE.get(mime_type.strip().lower())


MIME_TYPES_BY_KIND: dict[MimeKind, str] = {
    MimeKind.PDF: "application/pdf",
    MimeKind.JPEG: "image/jpeg",
    MimeKind.PNG: "image/png",
}

KINDS_BY_MIME_TYPE: dict[str, MimeKind] = {
    mime_type: kind for kind, mime_type in MIME_TYPES_BY_KIND.items()
}


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


class DeliveryMethod(str, Enum):
    SAVED = "saved"
    DOWNLOAD = "download"


class ByteSource(Protocol):
    def getvalue(self) -> bytes: ...


@dataclass(frozen=True)
class UploadCandidate:
    name: str
    mime_type: str
    size_bytes: int
    source: ByteSource


@dataclass(frozen=True)
class StagedPdf:
    file_id: str
    name: str
    size_bytes: int
    source: ByteSource = field(repr=False, compare=False)

    @property
    def kind(self) -> MimeKind:
        return MimeKind.PDF

    @property
    def size_mib(self) -> float:
        return round(self.size_bytes / (1024 * 1024), 2)


@dataclass(frozen=True)
class StagedImage:
    file_id: str
    name: str
    size_bytes: int
    kind: MimeKind
    source: ByteSource = field(repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.kind not in (MimeKind.JPEG, MimeKind.PNG):
            raise ValueError(f"StagedImage cannot hold kind {self.kind.value}")

    @property
    def size_mib(self) -> float:
        return round(self.size_bytes / (1024 * 1024), 2)


StagedFile = Union[StagedPdf, StagedImage]


@dataclass(frozen=True)
class IntakeResult:
    files: tuple[StagedFile, ...]
    accepted: list[StagedFile]
    skipped_names: list[str]


@dataclass(frozen=True)
class Notice:
    level: str
    text: str
    expires_at: float | None = None

    def is_active(self, now: float) -> bool:
        return self.expires_at is None or now < self.expires_at


@dataclass(frozen=True)
class AssemblerState:
    files: tuple[StagedFile, ...] = ()
    processing: bool = False
    notice: Notice | None = None
    success_message: str = ""


@dataclass(frozen=True)
class MergeResult:
    output_name: str
    output_pdf: bytes
    page_count: int
    source_count: int


@dataclass(frozen=True)
class DeliveryReceipt:
    method: DeliveryMethod
    file_name: str
    payload: bytes = field(repr=False)
    saved_path: Path | None = None

    @property
    def message(self) -> str:
        if self.method == DeliveryMethod.SAVED:
            return "PDF saved successfully!"
        return "PDF downloaded successfully!"


@dataclass(frozen=True)
class OperationMessage:
    level: str
    text: str


@dataclass(frozen=True)
class OperationResult:
    status: Status
    messages: list[OperationMessage]
    metrics: dict[str, int | str] = field(default_factory=dict)
    receipt: DeliveryReceipt | None = None
