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

"""
Handles extraction of plain text from uploaded resumes (PDF, DOCX).
"""

import io
import logging
import threading
from typing import Optional

from docx import Document
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from resume_checker.models import ResumeUpload

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ('.pdf', '.docx', '.doc')

ZIP_SIGNATURE = b'PK\x03\x04'
OLE_SIGNATURE = b'\xD0\xCF\x11\xE0'


class ExtractionError(Exception):
    """Base class for failures turning an upload into text."""


class UnsupportedFormat(ExtractionError):
    """The file name does not carry a supported extension."""


class CorruptFile(ExtractionError):
    """The bytes do not decode as a valid PDF/DOCX."""


class ExtractionFailed(ExtractionError):
    """The document decoded but yielded no usable text."""


def is_supported_filename(name: str) -> bool:
    return name.lower().endswith(SUPPORTED_EXTENSIONS)


def validate_upload(upload: ResumeUpload, max_bytes: int) -> Optional[str]:
    """
    Checks extension and size before any decoding happens.

    Returns:
        str: A user-facing message when the upload is rejected, else None.
    """
    if not is_supported_filename(upload.name):
        return 'Please upload a PDF or DOCX file.'
    if upload.size > max_bytes:
        return f'File size must be less than {max_bytes / (1024 * 1024):g}MB.'
    return None


def read_pdf(data: bytes) -> str:
    """
    Extracts text from PDF bytes, page by page.
    Pages that fail to decode are skipped with a warning.
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = list(reader.pages)
    except PdfReadError as e:
        raise CorruptFile(
            f"Failed to parse PDF file: {e}. Please ensure it is a valid PDF file and try again."
        ) from e
    except Exception as e:
        logger.error(f"Unexpected PDF decoder failure: {e}")
        raise CorruptFile(
            f"Failed to parse PDF file: {e}. Please ensure it is a valid PDF file and try again."
        ) from e

    full_text = []
    for number, page in enumerate(pages, start=1):
        try:
            page_text = page.extract_text() or ""
        except Exception as e:
            logger.warning(f"Error extracting text from page {number}: {e}")
            continue
        if page_text.strip():
            full_text.append(page_text)

    text = '\n'.join(full_text).strip()
    if not text:
        raise ExtractionFailed(
            "No text could be extracted from the PDF. The file might be image-based or scanned; "
            "please export a text-based PDF."
        )
    logger.debug(f"Extracted {len(text)} characters from {len(pages)} PDF page(s)")
    return text


def read_docx(data: bytes) -> str:
    """
    Extracts paragraph text from DOCX bytes. Styles and images are discarded.
    """
    try:
        doc = Document(io.BytesIO(data))
    except Exception as e:
        raise CorruptFile(
            "Failed to parse DOCX file. Please ensure it is a valid document."
        ) from e

    full_text = []
    for para in doc.paragraphs:
        full_text.append(para.text)
    text = '\n'.join(full_text).strip()
    if not text:
        raise ExtractionFailed("The document does not contain any text.")
    logger.debug(f"Extracted {len(text)} characters from {len(doc.paragraphs)} paragraph(s)")
    return text


def read_doc(data: bytes) -> str:
    """
    Best-effort handling of legacy .doc uploads.
    Files that are really DOCX archives under a .doc name are decoded as DOCX;
    true Word 97-2003 binaries are not supported.
    """
    if data.startswith(ZIP_SIGNATURE):
        logger.info("Legacy .doc upload is an Office Open XML archive; reading as DOCX")
        return read_docx(data)
    if data.startswith(OLE_SIGNATURE):
        raise ExtractionFailed(
            "Legacy Word 97-2003 (.doc) files are not supported. Please save the resume as PDF or DOCX."
        )
    raise CorruptFile("Failed to parse DOC file. Please ensure it is a valid document.")


def extract_text(upload: ResumeUpload) -> str:
    """
    Converts an uploaded resume into plain text.

    Raises:
        UnsupportedFormat: extension is not .pdf/.docx/.doc (bytes are not inspected).
        CorruptFile: the bytes do not decode.
        ExtractionFailed: the document holds no extractable text.
    """
    name = upload.name.lower()
    if name.endswith('.pdf'):
        return read_pdf(upload.data)
    if name.endswith('.docx'):
        return read_docx(upload.data)
    if name.endswith('.doc'):
        return read_doc(upload.data)
    raise UnsupportedFormat('Unsupported file format. Please upload PDF or DOCX.')


def extract_text_with_timeout(upload: ResumeUpload, timeout: float) -> str:
    """
    Runs extract_text on a daemon thread and gives up after `timeout` seconds.
    A decoder that hangs is abandoned, not killed, and does not hold up
    interpreter exit.
    """
    outcome = {}

    def run():
        try:
            outcome['text'] = extract_text(upload)
        except Exception as e:
            outcome['error'] = e

    worker = threading.Thread(target=run, name=f"extract-{upload.name}", daemon=True)
    worker.start()
    worker.join(timeout)
    if worker.is_alive():
        logger.error(f"Extraction of {upload.name} timed out after {timeout}s")
        raise ExtractionFailed(
            f"Reading {upload.name} took longer than {timeout:g} seconds. "
            "The file may be malformed; please re-export it and try again."
        )
    if 'error' in outcome:
        raise outcome['error']
    return outcome['text']
