"""
Notes feature: plain-text extraction from uploaded documents.

Two formats are accepted: plain text (decoded as-is) and PDF (text layer,
page by page). There is no OCR, so a scanned PDF extracts to an empty string.
"""

import asyncio
import io
import logging
import mimetypes
from enum import Enum

from pypdf import PdfReader

from studynotes.core.exceptions import ExtractionError, UnsupportedFormat

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"
GENERIC_CONTENT_TYPES = {"", "application/octet-stream", "binary/octet-stream"}


class SourceFormat(str, Enum):
    TEXT = "text/plain"
    PDF = "application/pdf"


def resolve_format(declared_format: str | None, filename: str | None = None) -> SourceFormat:
    """Map a declared MIME type to a supported format.

    Parameters such as `; charset=utf-8` are ignored. A missing or generic
    content type falls back to the filename extension.

    Raises:
        UnsupportedFormat: For anything other than plain text or PDF.
    """
    mime = (declared_format or "").split(";", 1)[0].strip().lower()
    if mime in GENERIC_CONTENT_TYPES and filename:
        mime = (mimetypes.guess_type(filename)[0] or "").lower()

    try:
        return SourceFormat(mime)
    except ValueError:
        raise UnsupportedFormat(declared_format) from None


def decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        # Legacy encodings: latin-1 maps every byte
        return data.decode("latin-1")


async def extract_pdf_text(data: bytes) -> str:
    """Extract the text layer of a PDF, pages joined by a blank line.

    Yields to the event loop between pages so large documents do not block
    other requests.
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted and not reader.decrypt(""):
            raise ExtractionError("The PDF is password protected", detail="Remove the password and upload again.")

        pages: list[str] = []
        for page in reader.pages:
            page_text = (page.extract_text() or "").strip()
            if page_text:
                pages.append(page_text)
            await asyncio.sleep(0)
    except ExtractionError:
        raise
    except Exception as e:
        raise ExtractionError("Could not read the PDF", detail=str(e)) from e

    return PAGE_SEPARATOR.join(pages)


async def extract(data: bytes, declared_format: str | None, filename: str | None = None) -> str:
    """Convert an uploaded document into plain text.

    Raises:
        UnsupportedFormat: Declared format is not text or PDF (checked first).
        ExtractionError: Supported format that cannot be parsed.
    """
    source_format = resolve_format(declared_format, filename)

    if source_format is SourceFormat.PDF:
        text = await extract_pdf_text(data)
    else:
        text = decode_text(data)

    logger.info(f"Extracted {len(text)} chars from {filename or 'upload'} ({source_format.value})")
    return text
