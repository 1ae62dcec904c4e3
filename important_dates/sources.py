"""
Source loaders.

Reads syllabus files (PDF, HTML, plain text) and LMS assignment exports from
disk and turns them into RawSource / StructuredDateRecord inputs. This is
the only part of the package that does I/O; the extractor itself works on
the returned values.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Union

import pdfplumber
from bs4 import BeautifulSoup

from .models import RawSource, StructuredDateRecord

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Containers that hold the syllabus body on LMS pages, most specific first
SYLLABUS_SELECTORS = ['#syllabus', '.syllabus', '[class*="syllabus"]', '.user_content']

HTML_SUFFIXES = {'.html', '.htm'}


class SourceError(Exception):
    """Raised when a source file cannot be read or understood."""


def load_pdf_text(pdf_path: PathLike) -> str:
    """Extract text from a PDF, one page per line block.

    Args:
        pdf_path: Path to PDF file

    Returns:
        Page texts joined by newlines

    Raises:
        SourceError: if the file is missing or not a readable PDF
    """
    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        raise SourceError(f"PDF file not found: {pdf_path}")

    pages_text = []
    try:
        with pdfplumber.open(pdf_path) as pdf:
            for page in pdf.pages:
                text = page.extract_text()
                if text:
                    pages_text.append(text)
    except Exception as exc:
        raise SourceError(f"Could not read PDF {pdf_path}: {exc}") from exc

    full_text = "\n".join(pages_text)
    logger.info("Parsed PDF %s, extracted %d characters", pdf_path.name, len(full_text))
    return full_text


def html_to_text(html: str) -> str:
    """Extract the syllabus text from an HTML page.

    Uses the first syllabus-like container found, else the whole body.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    container = None
    for selector in SYLLABUS_SELECTORS:
        container = soup.select_one(selector)
        if container is not None:
            break
    if container is None:
        container = soup.body or soup
    for tag in container.find_all(['script', 'style']):
        tag.decompose()
    text = container.get_text("\n")
    logger.debug("Extracted %d characters from HTML syllabus", len(text))
    return text


def load_source(course_name: str, path: PathLike) -> RawSource:
    """Load one course document as a RawSource.

    Args:
        course_name: Course label for the resulting events
        path: .pdf, .html/.htm, or any plain-text file

    Returns:
        RawSource

    Raises:
        SourceError: if the file cannot be read
    """
    path = Path(path)
    if path.suffix.lower() == '.pdf':
        return RawSource(text=load_pdf_text(path), course_name=course_name, is_pdf=True)

    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise SourceError(f"Could not read {path}: {exc}") from exc

    if path.suffix.lower() in HTML_SUFFIXES:
        content = html_to_text(content)
    return RawSource(text=content, course_name=course_name, is_pdf=False)


def load_records(path: PathLike, course_name: Optional[str] = None) -> List[StructuredDateRecord]:
    """Load structured assignment records from a JSON file.

    The file holds a list of LMS assignment objects. Each object may carry
    its own "course_name"; course_name overrides it for all records.

    Raises:
        SourceError: if the file is missing, not JSON, or not a list of objects
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        raise SourceError(f"Could not load records from {path}: {exc}") from exc

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise SourceError(f"Expected a JSON list of objects in {path}")

    records = [StructuredDateRecord.from_api_dict(item, course_name=course_name) for item in data]
    logger.info("Loaded %d record(s) from %s", len(records), path.name)
    return records
