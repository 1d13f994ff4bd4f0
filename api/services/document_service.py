"""
Document Service - byte-range access to the repair catalog PDF
"""
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union

from api.config import config

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
PDF_MEDIA_TYPE = "application/pdf"

_RANGE = re.compile(r"^\s*bytes\s*=\s*(\d*)\s*-\s*(\d*)\s*$")


class DocumentNotFoundError(Exception):
    """Configured document is missing or unreadable"""


class RangeNotSatisfiableError(Exception):
    """Requested byte range lies outside the document"""

    def __init__(self, size: int):
        super().__init__(f"Range not satisfiable for {size} bytes")
        self.size = size


@dataclass(frozen=True)
class ByteRange:
    start: int
    end: int  # inclusive
    size: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def content_range(self) -> str:
        return f"bytes {self.start}-{self.end}/{self.size}"


def parse_range(header: str, size: int) -> ByteRange:
    """
    Parse a single ``bytes=start-end`` range against a file of ``size`` bytes.

    ``bytes=500-`` runs to the end, ``bytes=-500`` is the last 500 bytes and
    an end past the file is clamped.
    """
    match = _RANGE.match(header or "")
    if not match or (not match.group(1) and not match.group(2)):
        raise RangeNotSatisfiableError(size)

    first, last = match.group(1), match.group(2)
    if not first:
        suffix = int(last)
        if suffix == 0 or size == 0:
            raise RangeNotSatisfiableError(size)
        return ByteRange(max(size - suffix, 0), size - 1, size)

    start = int(first)
    end = int(last) if last else size - 1
    end = min(end, size - 1)
    if start >= size or start > end:
        raise RangeNotSatisfiableError(size)
    return ByteRange(start, end, size)


class DocumentService:
    """Serves the configured source PDF, whole or by byte range"""

    def __init__(self, pdf_path: Union[str, Path]):
        self.pdf_path = Path(pdf_path)

    def file_size(self) -> int:
        try:
            return self.pdf_path.stat().st_size
        except OSError as e:
            logger.error(f"PDF not readable: {self.pdf_path}: {e}")
            raise DocumentNotFoundError(str(self.pdf_path)) from e

    def resolve_range(self, range_header: Optional[str]) -> Optional[ByteRange]:
        """None for a full-body response, else the validated byte range."""
        size = self.file_size()
        if not range_header:
            return None
        return parse_range(range_header, size)

    def iter_bytes(self, start: int = 0, end: Optional[int] = None) -> Iterator[bytes]:
        """Yield the file from ``start`` to ``end`` inclusive in chunks."""
        with open(self.pdf_path, "rb") as f:
            f.seek(start)
            remaining = None if end is None else end - start + 1
            while remaining is None or remaining > 0:
                size = CHUNK_SIZE if remaining is None else min(CHUNK_SIZE, remaining)
                chunk = f.read(size)
                if not chunk:
                    break
                if remaining is not None:
                    remaining -= len(chunk)
                yield chunk


document_service = DocumentService(config.REPAIR_PDF_PATH)


def get_document_service() -> DocumentService:
    return document_service
