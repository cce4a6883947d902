# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import io
import threading
import unittest
from unittest.mock import patch, MagicMock

from docx import Document
from pypdf import PdfWriter

from resume_checker import ingest
from resume_checker.models import ResumeUpload


def docx_bytes(*lines: str) -> bytes:
    doc = Document()
    for line in lines:
        doc.add_paragraph(line)
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def blank_pdf_bytes() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class TestValidateUpload(unittest.TestCase):
    def test_accepts_supported(self):
        for name in ("cv.pdf", "CV.DOCX", "old.doc"):
            self.assertIsNone(ingest.validate_upload(ResumeUpload(name, b"x"), 1024))

    def test_rejects_extension(self):
        message = ingest.validate_upload(ResumeUpload("cv.txt", b"x"), 1024)
        self.assertEqual(message, 'Please upload a PDF or DOCX file.')

    def test_rejects_size(self):
        message = ingest.validate_upload(ResumeUpload("cv.pdf", b"x" * 11), 10)
        self.assertTrue(message.startswith('File size must be less than'))
        self.assertIsNone(ingest.validate_upload(ResumeUpload("cv.pdf", b"x" * 10), 10))
        limit = ingest.validate_upload(ResumeUpload("cv.pdf", b"x" * (10 * 1024 * 1024 + 1)), 10 * 1024 * 1024)
        self.assertEqual(limit, 'File size must be less than 10MB.')


class TestExtractText(unittest.TestCase):
    def test_unsupported_extension_does_not_read(self):
        upload = ResumeUpload("resume.txt", MagicMock())
        with patch('resume_checker.ingest.read_pdf') as mock_pdf, \
                patch('resume_checker.ingest.read_docx') as mock_docx:
            with self.assertRaises(ingest.UnsupportedFormat):
                ingest.extract_text(upload)
            mock_pdf.assert_not_called()
            mock_docx.assert_not_called()

    def test_read_docx(self):
        upload = ResumeUpload("cv.docx", docx_bytes("Jane Doe", "Python developer"))
        self.assertEqual(ingest.extract_text(upload), "Jane Doe\nPython developer")

    def test_empty_docx(self):
        with self.assertRaises(ingest.ExtractionFailed):
            ingest.extract_text(ResumeUpload("cv.docx", docx_bytes()))

    def test_corrupt_docx(self):
        with self.assertRaises(ingest.CorruptFile):
            ingest.extract_text(ResumeUpload("cv.docx", b"not a zip archive"))

    def test_corrupt_pdf(self):
        with self.assertRaises(ingest.CorruptFile):
            ingest.extract_text(ResumeUpload("cv.pdf", b"garbage bytes"))

    def test_blank_pdf_has_no_text(self):
        with self.assertRaises(ingest.ExtractionFailed):
            ingest.extract_text(ResumeUpload("cv.pdf", blank_pdf_bytes()))

    @patch('resume_checker.ingest.PdfReader')
    def test_pdf_pages_joined_and_bad_pages_skipped(self, mock_reader_class):
        first, broken, third = MagicMock(), MagicMock(), MagicMock()
        first.extract_text.return_value = "Page one"
        broken.extract_text.side_effect = ValueError("bad content stream")
        third.extract_text.return_value = "Page three"
        mock_reader_class.return_value.pages = [first, broken, third]

        self.assertEqual(ingest.read_pdf(b"%PDF-"), "Page one\nPage three")

    def test_errors_share_a_base(self):
        for cls in (ingest.UnsupportedFormat, ingest.CorruptFile, ingest.ExtractionFailed):
            self.assertTrue(issubclass(cls, ingest.ExtractionError))


class TestLegacyDoc(unittest.TestCase):
    def test_docx_saved_as_doc(self):
        upload = ResumeUpload("old.doc", docx_bytes("Jane Doe"))
        self.assertEqual(ingest.extract_text(upload), "Jane Doe")

    def test_word_97_binary(self):
        data = ingest.OLE_SIGNATURE + b"\x00" * 64
        with self.assertRaises(ingest.ExtractionFailed):
            ingest.extract_text(ResumeUpload("old.doc", data))

    def test_unknown_bytes(self):
        with self.assertRaises(ingest.CorruptFile):
            ingest.extract_text(ResumeUpload("old.doc", b"plain text"))


class TestExtractTimeout(unittest.TestCase):
    def test_returns_text(self):
        upload = ResumeUpload("cv.docx", docx_bytes("Jane Doe"))
        self.assertEqual(ingest.extract_text_with_timeout(upload, 5), "Jane Doe")

    def test_propagates_errors(self):
        with self.assertRaises(ingest.UnsupportedFormat):
            ingest.extract_text_with_timeout(ResumeUpload("cv.txt", b"x"), 5)

    def test_decoder_runs_on_daemon_thread(self):
        seen = []

        def fake_extract(upload):
            seen.append(threading.current_thread().daemon)
            return "text"

        with patch('resume_checker.ingest.extract_text', side_effect=fake_extract):
            self.assertEqual(ingest.extract_text_with_timeout(ResumeUpload("cv.pdf", b"x"), 5), "text")
        self.assertEqual(seen, [True])

    def test_hung_decoder_times_out(self):
        release = threading.Event()
        try:
            with patch('resume_checker.ingest.extract_text', side_effect=lambda upload: release.wait(5)):
                with self.assertRaises(ingest.ExtractionFailed):
                    ingest.extract_text_with_timeout(ResumeUpload("cv.pdf", b"x"), 0.05)
        finally:
            release.set()


if __name__ == '__main__':
    unittest.main()
