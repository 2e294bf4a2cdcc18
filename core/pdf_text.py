# core/pdf_text.py
from typing import List, Tuple
import fitz
from util.timing import timed
import logging

logger = logging.getLogger(__name__)

PARAGRAPH_SEP = "\n\n"


def _page_paragraphs(page: "fitz.Page") -> List[str]:
    # blocks: (x0, y0, x1, y1, text, block_no, block_type); type 0 is text
    out: List[str] = []
    for block in page.get_text("blocks") or []:
        if len(block) > 6 and block[6] != 0:
            continue
        txt = " ".join((block[4] or "").split())
        if txt:
            out.append(txt)
    return out


def extract_pages_paragraphs(file_bytes: bytes) -> List[Tuple[int, List[str]]]:
    """
    Return [(page_number, [paragraph, ...])] for the whole PDF.
    If parsing fails, returns [].
    """
    try:
        out: List[Tuple[int, List[str]]] = []
        with timed(logger, "pdf.open"):
            with fitz.open(stream=file_bytes, filetype="pdf") as doc:
                pages = doc.page_count
                with timed(logger, "pdf.parse", pages=pages):
                    for i in range(pages):
                        out.append((i + 1, _page_paragraphs(doc.load_page(i))))
        logger.info("pdf.pages count=%d", len(out))
        return out
    except Exception:
        # do not log payloads
        logger.error("pdf.parse.error", exc_info=True)
        return []


def extract_knowledge_base_text(file_bytes: bytes) -> str:
    """
    Flatten a PDF into knowledge-base text: one paragraph per text block,
    paragraphs separated by a blank line so the chunk splitter sees them.
    """
    pages = extract_pages_paragraphs(file_bytes)
    paragraphs = [p for _, paras in pages for p in paras]
    return PARAGRAPH_SEP.join(paragraphs)
