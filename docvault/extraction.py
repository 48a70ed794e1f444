import logging
import re
from pathlib import Path

from pdfminer.high_level import extract_text

logger = logging.getLogger(__name__)

PDF_TYPES = {"application/pdf", "application/x-pdf"}


def clean_pdf_text(raw: str) -> str:
    if not raw:
        return ""

    raw = raw.replace("\x0c", "\n\n")
    raw = raw.replace("\r\n", "\n").replace("\r", "\n")
    raw = re.sub(r"\n{3,}", "\n\n", raw)
    raw = re.sub(r"[ \t]{2,}", " ", raw)
    raw = "\n".join(line.strip() for line in raw.split("\n"))

    return raw.strip()


class TextExtractor:
    """Pulls searchable text out of a stored file.

    PDFs go through pdfminer. Images would need an OCR service, which is not
    wired in, so they get a placeholder. ``extract`` never raises: an upload
    must not fail because its text could not be read.
    """

    def extract(self, path: str | Path, content_type: str | None = None) -> str:
        path = Path(path)
        try:
            if path.suffix.lower() == ".pdf" or content_type in PDF_TYPES:
                return self._extract_pdf(path)
            return self._placeholder(path)
        except Exception:
            logger.warning("text extraction failed for %s", path.name, exc_info=True)
            return ""

    def _extract_pdf(self, path: Path) -> str:
        return clean_pdf_text(extract_text(str(path)) or "")

    def _placeholder(self, path: Path) -> str:
        if not path.is_file():
            raise FileNotFoundError(path)
        logger.debug("no OCR backend, returning placeholder for %s", path.name)
        return f"OCR text would be extracted from {path.name} in a real implementation."
