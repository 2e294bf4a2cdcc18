# tests/test_pdf_text.py
import fitz

from core.chunking import split_into_chunks
from core.pdf_text import extract_knowledge_base_text, extract_pages_paragraphs

FIRST = "Dilarang bekerja pada ketinggian lebih dari 1,8 meter tanpa harness."
SECOND = "Wajib memasang personal LOTO pada saat melakukan perbaikan unit."


def _pdf() -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), FIRST, fontsize=9)
    page.insert_text((72, 400), SECOND, fontsize=9)
    doc.new_page().insert_text((72, 72), "Halaman dua.", fontsize=9)
    data = doc.tobytes()
    doc.close()
    return data


class TestPdfText:
    def test_paragraphs_per_page(self):
        pages = extract_pages_paragraphs(_pdf())
        assert [n for n, _ in pages] == [1, 2]
        assert pages[0][1] == [FIRST, SECOND]
        assert pages[1][1] == ["Halaman dua."]

    def test_knowledge_base_text_splits_back_into_paragraphs(self):
        text = extract_knowledge_base_text(_pdf())
        assert text == f"{FIRST}\n\n{SECOND}\n\nHalaman dua."
        assert split_into_chunks(text) == [FIRST, SECOND]

    def test_garbage_bytes_yield_nothing(self):
        assert extract_pages_paragraphs(b"not a pdf") == []
        assert extract_knowledge_base_text(b"not a pdf") == ""
