"""Data models shared by the upload and post-processing stages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

BYTES_PER_MB = 1024 * 1024


class LifecycleStage(str, Enum):
    """Host hook points this plugin can attach to."""

    BEFORE_TRANSFORM = "before_transform"
    """Runs before the host hands images to transformers."""

    BEFORE_UPLOAD = "before_upload"
    """Runs after transformation, before the uploader."""

    AFTER_UPLOAD = "after_upload"
    """Runs after the uploader reported success."""


@dataclass
class ImageRecord:
    """One image moving through a batch.

    The host creates the record and owns ``buffer``; the uploader fills
    ``img_url`` and ``full_result``, the post-processor fills
    ``display_text``.  Records are mutated in place and are not kept after
    the batch.
    """

    buffer: bytes
    file_name: str
    extension: str | None = None

    img_url: str | None = None
    """Remote URL, set once the upload succeeds."""

    full_result: dict[str, Any] | None = None
    """Decoded im.ge response, stored unmodified."""

    display_text: str | None = None
    """Markdown reference derived from ``img_url``."""

    @property
    def size_bytes(self) -> int:
        return len(self.buffer)

    @property
    def size_mb(self) -> float:
        return len(self.buffer) / BYTES_PER_MB

    def __repr__(self) -> str:
        # Keep multi-megabyte buffers out of logs and tracebacks.
        return (
            f"ImageRecord(file_name={self.file_name!r}, extension={self.extension!r}, "
            f"size_bytes={self.size_bytes}, img_url={self.img_url!r})"
        )
