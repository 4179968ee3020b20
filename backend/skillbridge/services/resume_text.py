# backend/skillbridge/services/resume_text.py
from __future__ import annotations

import base64
import binascii
import io
import logging
import re
import zipfile
from typing import Optional

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError
from docx import Document  # python-docx
from docx.opc.exceptions import PackageNotFoundError
from unidecode import unidecode

from skillbridge.errors import BadInput

log = logging.getLogger(__name__)

MAX_RESUME_BYTES = 5 * 1024 * 1024

PDF_TYPES = {"application/pdf"}
DOCX_TYPES = {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"}


def _clean_text(text: str) -> str:
    # ASCII-fold for the prompt, then drop control chars and excess whitespace
    text = unidecode(text)
    text = re.sub(r"[^\x09\x0A\x0D\x20-\x7E]", " ", text)
    text = re.sub(r"[ \t]{2,}", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def _read_pdf(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    return "\n\n".join((p.extract_text() or "") for p in reader.pages)


def _read_docx(data: bytes) -> str:
    doc = Document(io.BytesIO(data))
    return "\n".join(p.text for p in doc.paragraphs)


def decode_resume(content_b64: str) -> bytes:
    # clients may send a full data URL
    if content_b64.startswith("data:") and "," in content_b64:
        content_b64 = content_b64.split(",", 1)[1]
    try:
        data = base64.b64decode(content_b64, validate=True)
    except (binascii.Error, ValueError):
        raise BadInput("resumeContent is not valid base64")
    if len(data) > MAX_RESUME_BYTES:
        raise BadInput("resumeContent is too large")
    return data


def resume_to_text(content_b64: Optional[str], mime_type: Optional[str]) -> str:
    """Turn an uploaded resume (base64 body + mime type) into prompt-ready text."""
    if not content_b64:
        return ""
    data = decode_resume(content_b64)
    kind = (mime_type or "").split(";")[0].strip().lower()

    try:
        if kind in PDF_TYPES:
            raw = _read_pdf(data)
        elif kind in DOCX_TYPES:
            raw = _read_docx(data)
        elif kind.startswith("text/") or not kind:
            raw = data.decode("utf-8", errors="ignore")
        else:
            raise BadInput("Unsupported resume type. Upload PDF, DOCX, or plain text.")
    except BadInput:
        raise
    except (PdfReadError, PackageNotFoundError, zipfile.BadZipFile, ValueError, KeyError, OSError) as e:
        log.warning("Resume extraction failed (%s): %s", kind, e)
        raise BadInput("Failed to read resume")

    return _clean_text(raw or "")
