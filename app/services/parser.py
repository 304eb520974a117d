"""Resume text extraction - turns uploaded PDF and plain-text files into text."""

import io
import logging
import re
import warnings

import pdfplumber

logger = logging.getLogger(__name__)

# pdfminer is chatty about malformed CropBoxes and font glyphs
logging.getLogger("pdfplumber").setLevel(logging.ERROR)
logging.getLogger("pdfminer").setLevel(logging.ERROR)
warnings.filterwarnings("ignore", category=UserWarning, module="pdfminer")

_CID_RE = re.compile(r"\(cid:\d+\)")

DOC_NOT_SUPPORTED = (
    "DOC and DOCX formats are not supported yet. "
    "Please export your resume as PDF or plain text and try again."
)
UNSUPPORTED_TYPE = "Unsupported file type. Please upload a PDF or plain text resume."


class UnsupportedFormatError(ValueError):
    """Raised when an upload is not a PDF or plain-text document."""


def parse_pdf(content: bytes) -> str:
    """Extract text from PDF bytes using pdfplumber.

    Args:
        content: Raw PDF file bytes.

    Returns:
        Page texts joined by newlines, with ``(cid:N)`` glyph artifacts removed.

    Raises:
        ValueError: If the PDF is malformed, encrypted, or unreadable.
    """
    try:
        with pdfplumber.open(io.BytesIO(content)) as pdf:
            pages_text = [page.extract_text() or "" for page in pdf.pages]
    except Exception as exc:
        logger.error("Failed to parse PDF: %s", exc)
        raise ValueError(f"Failed to parse PDF file: {exc}") from exc

    return _CID_RE.sub("", "\n".join(pages_text))


def parse_plain_text(content: bytes) -> str:
    """Decode plain-text bytes as UTF-8, replacing undecodable bytes."""
    return content.decode("utf-8", errors="replace")


def extract_text(content: bytes, filename: str, content_type: str | None = None) -> str:
    """Extract resume text from an uploaded file.

    The content type reported by the client is checked first, then the
    filename extension.

    Args:
        content: Raw file bytes.
        filename: Original filename.
        content_type: MIME type reported by the client, if any.

    Returns:
        The decoded text, possibly blank when the document holds no text layer.

    Raises:
        UnsupportedFormatError: If the file is neither PDF nor plain text.
        ValueError: If the PDF cannot be read.
    """
    content_type = (content_type or "").lower()
    extension = filename.rsplit(".", maxsplit=1)[-1].lower() if "." in filename else ""

    if content_type == "application/pdf" or extension == "pdf":
        return parse_pdf(content)
    if content_type.startswith("text/") or extension == "txt":
        return parse_plain_text(content)

    if extension in ("doc", "docx"):
        raise UnsupportedFormatError(DOC_NOT_SUPPORTED)
    raise UnsupportedFormatError(UNSUPPORTED_TYPE)
