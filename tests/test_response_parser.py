# tests/test_response_parser.py
from core.entities import GenerationOutput
from core.response_parser import (
    EMPTY_REPLY,
    TRUNCATED_REPLY,
    UNPARSEABLE_REPLY,
    normalize_reply,
    parse_response,
)


class TestParseResponse:
    def test_extracts_all_fields(self):
        text = "KATEGORI: Lock Out & Tag Out\nCONFIDENCE: 85%\nALASAN: LOTO tidak dipasang."
        parsed = parse_response(text)
        assert parsed.category == "Lock Out & Tag Out"
        assert parsed.confidence == "85%"
        assert parsed.reasoning == "LOTO tidak dipasang."
        assert parsed.partial is False

    def test_accepts_qualified_category_label(self):
        text = "KATEGORI PSPP: 39\nCONFIDENCE: 70%\nALASAN: Mabuk saat mengemudi."
        assert parse_response(text).category == "39"
        assert parse_response("KATEGORI TBC: Bahaya Elektrikal").category == "Bahaya Elektrikal"

    def test_labels_are_case_insensitive(self):
        parsed = parse_response("kategori: Air\nconfidence: 60%\nalasan: dekat air")
        assert (parsed.category, parsed.confidence, parsed.reasoning) == (
            "Air",
            "60%",
            "dekat air",
        )

    def test_reasoning_spans_to_end_of_text(self):
        text = "KATEGORI: X\nCONFIDENCE: 50%\nALASAN: baris satu\nbaris dua\n"
        assert parse_response(text).reasoning == "baris satu\nbaris dua"

    def test_missing_labels_fall_back_to_placeholders(self):
        parsed = parse_response("the model rambled without labels")
        assert parsed.category == "Unknown"
        assert parsed.confidence == "Unknown"
        assert parsed.reasoning == "No reasoning provided"

    def test_empty_label_value_does_not_swallow_next_line(self):
        parsed = parse_response("KATEGORI:\nCONFIDENCE: 40%")
        assert parsed.category == "Unknown"
        assert parsed.confidence == "40%"

    def test_partial_marks_category_and_missing_confidence(self):
        parsed = parse_response("KATEGORI: Pengoperasian Kendaraan", partial=True)
        assert parsed.category == "Pengoperasian Kendaraan (Partial)"
        assert parsed.confidence == "Low (Truncated)"
        assert parsed.partial is True

    def test_partial_keeps_present_confidence(self):
        parsed = parse_response("KATEGORI: X\nCONFIDENCE: 80%", partial=True)
        assert parsed.confidence == "80%"

    def test_partial_with_unknown_category(self):
        assert parse_response("", partial=True).category == "Unknown (Partial)"


class TestNormalizeReply:
    def test_complete_reply_passes_through(self):
        out = GenerationOutput(text="KATEGORI: X", finish_reason="STOP")
        assert normalize_reply(out) == ("KATEGORI: X", False)

    def test_truncated_reply_keeps_text_and_is_partial(self):
        out = GenerationOutput(text="KATEGORI: X\nCONF", finish_reason="MAX_TOKENS")
        assert normalize_reply(out) == ("KATEGORI: X\nCONF", True)

    def test_truncated_without_text_uses_placeholder(self):
        text, partial = normalize_reply(GenerationOutput(text=None, finish_reason="MAX_TOKENS"))
        assert text == TRUNCATED_REPLY
        assert partial is True
        parsed = parse_response(text, partial=partial)
        assert parsed.category == "Response Truncated"
        assert parsed.confidence == "Low"

    def test_missing_text_is_unparseable(self):
        text, partial = normalize_reply(GenerationOutput(text=None, finish_reason="STOP"))
        assert text == UNPARSEABLE_REPLY
        assert parse_response(text, partial=partial).category == "Analysis Error"

    def test_blank_text_is_empty_reply(self):
        text, partial = normalize_reply(GenerationOutput(text="   ", finish_reason="STOP"))
        assert text == EMPTY_REPLY
        parsed = parse_response(text, partial=partial)
        assert parsed.category == "No Response"
        assert parsed.confidence == "Low (Truncated)"
