"""
Document text extraction.

Supported formats:
- PDF: pdfplumber
- DOCX: docx2txt
- TXT: decoded as UTF-8 (undecodable bytes replaced)
"""

import logging
import os
from typing import Iterable
import docx2txt
import pdfplumber
from app.core.config import settings

logger = logging.getLogger(__name__)

JOB_DESCRIPTION_EXTENSIONS = (".pdf", ".docx", ".txt")
RESUME_EXTENSIONS = (".pdf", ".docx")


class FileParsingError(Exception):
    """Raised when a document cannot be turned into text."""
    pass


def file_extension(file_name: str) -> str:
    return os.path.splitext(file_name or "")[1].lower()


def validate_file_type(file_name: str, allowed_extensions: Iterable[str] = JOB_DESCRIPTION_EXTENSIONS) -> bool:
    return file_extension(file_name) in tuple(allowed_extensions)


def validate_file_size(size: int, max_size_bytes: int = None) -> bool:
    if max_size_bytes is None:
        max_size_bytes = settings.MAX_UPLOAD_SIZE_BYTES
    return size <= max_size_bytes


def extract_text(file_path: str, file_name: str) -> str:
    """
    Extract plain text from a staged upload.

    Args:
        file_path: Path of the staged file on disk
        file_name: Original file name (decides the format)

    Returns:
        The extracted text

    Raises:
        FileParsingError: Unsupported format, unreadable file, or no text found
    """
    file_ext = file_extension(file_name)

    try:
        if file_ext == ".pdf":
            extracted_text = ""
            with pdfplumber.open(file_path) as pdf:
                for page_num, page in enumerate(pdf.pages, 1):
                    text = page.extract_text()
                    if text:
                        extracted_text += text + "\n"
                        logger.debug(f"Extracted {len(text)} chars from page {page_num} of {file_name}")

        elif file_ext == ".docx":
            extracted_text = docx2txt.process(file_path) or ""

        elif file_ext == ".txt":
            with open(file_path, "rb") as f:
                extracted_text = f.read().decode("utf-8", errors="replace")

        else:
            raise FileParsingError(f"Unsupported file format: {file_ext or 'unknown'}")

    except FileParsingError:
        raise
    except Exception as e:
        raise FileParsingError(f"Failed to parse {file_name}: {e}")

    if not extracted_text.strip():
        raise FileParsingError(
            f"No text could be extracted from {file_name}. The file may be corrupted or a scanned image."
        )

    logger.info(f"Extracted {len(extracted_text)} chars from {file_name}")
    return extracted_text
