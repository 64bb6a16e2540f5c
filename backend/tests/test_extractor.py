"""
Unit tests for the document text extractor.
"""

import io

import pytest
from pypdf import PdfWriter

from studynotes.core.exceptions import ExtractionError, UnsupportedFormat
from studynotes.features.notes.extractor import SourceFormat, decode_text, extract, resolve_format
from fakes import make_pdf


# -- resolve_format --

class TestResolveFormat:
    def test_plain_text(self):
        assert resolve_format("text/plain") is SourceFormat.TEXT

    def test_pdf(self):
        assert resolve_format("application/pdf") is SourceFormat.PDF

    def test_charset_parameter_is_ignored(self):
        assert resolve_format("text/plain; charset=utf-8") is SourceFormat.TEXT

    def test_case_insensitive(self):
        assert resolve_format("Application/PDF") is SourceFormat.PDF

    def test_octet_stream_falls_back_to_filename(self):
        assert resolve_format("application/octet-stream", "lecture.pdf") is SourceFormat.PDF
        assert resolve_format(None, "notes.txt") is SourceFormat.TEXT

    @pytest.mark.parametrize("declared", ["image/png", "application/msword", "text/html"])
    def test_unsupported(self, declared):
        with pytest.raises(UnsupportedFormat) as exc_info:
            resolve_format(declared, "file.pdf")
        assert exc_info.value.declared_format == declared

    def test_filename_is_not_trusted_over_declared_type(self):
        with pytest.raises(UnsupportedFormat):
            resolve_format("image/jpeg", "notes.txt")

    def test_nothing_declared(self):
        with pytest.raises(UnsupportedFormat):
            resolve_format(None)


# -- decode_text --

class TestDecodeText:
    def test_utf8_with_bom(self):
        assert decode_text(b"\xef\xbb\xbfXin ch\xc3\xa0o") == "Xin ch\u00e0o"

    def test_latin1_fallback(self):
        assert decode_text("café".encode("latin-1")) == "café"


# -- extract --

class TestExtract:
    @pytest.mark.asyncio
    async def test_plain_text_passes_through(self):
        assert await extract(b"The sky is blue.", "text/plain") == "The sky is blue."

    @pytest.mark.asyncio
    async def test_empty_text_file(self):
        assert await extract(b"", "text/plain") == ""

    @pytest.mark.asyncio
    async def test_unsupported_format_checked_before_parsing(self):
        with pytest.raises(UnsupportedFormat):
            await extract(b"%PDF-1.4 not really", "image/png")

    @pytest.mark.asyncio
    async def test_pdf_pages_joined_with_blank_line(self):
        data = make_pdf(["First page text", "Second page text"])
        text = await extract(data, "application/pdf", "lecture.pdf")
        assert text.split("\n\n") == ["First page text", "Second page text"]

    @pytest.mark.asyncio
    async def test_pages_without_text_are_skipped(self):
        data = make_pdf(["Intro", "", "Conclusion"])
        text = await extract(data, "application/pdf")
        assert text.split("\n\n") == ["Intro", "Conclusion"]

    @pytest.mark.asyncio
    async def test_scanned_pdf_extracts_to_empty_string(self):
        writer = PdfWriter()
        writer.add_blank_page(width=612, height=792)
        writer.add_blank_page(width=612, height=792)
        buffer = io.BytesIO()
        writer.write(buffer)

        assert await extract(buffer.getvalue(), "application/pdf") == ""

    @pytest.mark.asyncio
    async def test_corrupt_pdf(self):
        with pytest.raises(ExtractionError) as exc_info:
            await extract(b"this is not a pdf at all", "application/pdf")
        assert exc_info.value.status_code == 422

    @pytest.mark.asyncio
    async def test_empty_pdf_body(self):
        with pytest.raises(ExtractionError):
            await extract(b"", "application/pdf")

    @pytest.mark.asyncio
    async def test_password_protected_pdf(self):
        writer = PdfWriter()
        writer.add_blank_page(width=612, height=792)
        writer.encrypt(user_password="secret", algorithm="RC4-128")
        buffer = io.BytesIO()
        writer.write(buffer)

        with pytest.raises(ExtractionError) as exc_info:
            await extract(buffer.getvalue(), "application/pdf")
        assert "password" in exc_info.value.message
