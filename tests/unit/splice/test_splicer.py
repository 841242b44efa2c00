import pytest

from jxml.exceptions import MissingFixedAnchorError
from jxml.formatting import canonicalize_xml
from jxml.splice import (
    DEFAULT_PAYLOAD_MARKERS,
    Fragment,
    MarkerPair,
    extract_payload,
    splice_fragment,
    splice_fragments,
)

MASTER = (
    "<Root>\n"
    "<!-- START(a.cxml) -->old a<!-- END(a.cxml) -->\n"
    "<!-- START(b.cxml) -->old b<!-- END(b.cxml) -->\n"
    "</Root>"
)


class TestMarkerPair:
    def test_fragment_anchors(self) -> None:
        anchors = MarkerPair.for_fragment("boss.cxml")

        assert anchors.start == "<!-- START(boss.cxml) -->"
        assert anchors.end == "<!-- END(boss.cxml) -->"

    def test_default_payload_markers(self) -> None:
        assert DEFAULT_PAYLOAD_MARKERS == MarkerPair("<Objects>", "</Objects>")


class TestExtractPayload:
    def test_text_between_markers(self) -> None:
        assert extract_payload("<Objects><X/></Objects>") == "<X/>"

    def test_first_start_and_last_end(self) -> None:
        text = "<Objects><Objects/></Objects><Y/></Objects>"

        assert extract_payload(text) == "<Objects/></Objects><Y/>"

    def test_adjacent_markers_give_empty_payload(self) -> None:
        assert extract_payload("<Objects></Objects>") == ""

    def test_end_marker_before_start_gives_empty_payload(self) -> None:
        assert extract_payload("</Objects><Objects>") == ""

    @pytest.mark.parametrize("text", ["<X/>", "<Objects><X/>", "<X/></Objects>"])
    def test_missing_marker_gives_whole_text(self, text: str) -> None:
        assert extract_payload(text) == text

    def test_custom_markers(self) -> None:
        markers = MarkerPair("<Body>", "</Body>")

        assert extract_payload("<Body>x</Body>", markers) == "x"

    def test_whole_text_fallback_drops_the_xml_declaration(self) -> None:
        text = '<?xml version="1.0" encoding="UTF-8"?>\n<Objects/>'

        assert extract_payload(text) == "<Objects/>"

    def test_declaration_before_markers_is_outside_the_payload(self) -> None:
        text = '<?xml version="1.0"?><Objects><X/></Objects>'

        assert extract_payload(text) == "<X/>"

    def test_processing_instructions_are_not_declarations(self) -> None:
        text = '<?xml-stylesheet href="a.xsl"?><X/>'

        assert extract_payload(text) == text


class TestSpliceFragment:
    def test_replaces_the_anchored_span(self) -> None:
        fragment = Fragment("a.cxml", "<Objects><New/></Objects>")

        result = splice_fragment(MASTER, fragment)

        assert result == (
            "<Root>\n"
            "<!-- START(a.cxml) -->\n<New/>\n<!-- END(a.cxml) -->\n"
            "<!-- START(b.cxml) -->old b<!-- END(b.cxml) -->\n"
            "</Root>"
        )

    def test_spans_from_first_start_to_last_end(self) -> None:
        document = (
            "<!-- START(a.cxml) -->1<!-- END(a.cxml) -->"
            "<!-- START(a.cxml) -->2<!-- END(a.cxml) -->"
        )

        result = splice_fragment(document, Fragment("a.cxml", "x"))

        assert result == "<!-- START(a.cxml) -->\nx\n<!-- END(a.cxml) -->"

    def test_missing_end_anchor(self) -> None:
        document = "<!-- START(a.cxml) -->"

        with pytest.raises(MissingFixedAnchorError) as exc_info:
            splice_fragment(document, Fragment("a.cxml", "x"))

        error = exc_info.value
        assert error.key == "a.cxml"
        assert error.has_start is True
        assert error.has_end is False

    def test_missing_both_anchors(self) -> None:
        with pytest.raises(MissingFixedAnchorError) as exc_info:
            splice_fragment("<Root/>", Fragment("zzz.cxml", "x"))

        assert exc_info.value.has_start is False
        assert exc_info.value.has_end is False

    def test_end_anchor_before_start_anchor(self) -> None:
        document = "<!-- END(a.cxml) --><!-- START(a.cxml) -->"

        with pytest.raises(MissingFixedAnchorError):
            splice_fragment(document, Fragment("a.cxml", "x"))


class TestSpliceFragments:
    def test_applies_fragments_in_order(self) -> None:
        result = splice_fragments(
            MASTER,
            [Fragment("a.cxml", "A"), Fragment("b.cxml", "B")],
        )

        assert result.applied == ("a.cxml", "b.cxml")
        assert result.skipped == ()
        assert "-->\nA\n<!--" in result.document
        assert "-->\nB\n<!--" in result.document

    def test_missing_anchor_skips_only_that_fragment(self) -> None:
        result = splice_fragments(
            MASTER,
            [Fragment("missing.cxml", "M"), Fragment("b.cxml", "B")],
        )

        assert result.applied == ("b.cxml",)
        assert [e.key for e in result.skipped] == ["missing.cxml"]
        assert result.document == splice_fragment(MASTER, Fragment("b.cxml", "B"))

    def test_document_is_untouched_when_every_fragment_is_skipped(self) -> None:
        result = splice_fragments(MASTER, [Fragment("nope.cxml", "x")])

        assert result.document == MASTER

    def test_no_fragments(self) -> None:
        result = splice_fragments(MASTER, [])

        assert result.document == MASTER
        assert result.applied == ()

    def test_later_fragments_see_earlier_splices(self) -> None:
        nested = "<Objects><!-- START(b.cxml) --><!-- END(b.cxml) --></Objects>"
        document = "<!-- START(a.cxml) --><!-- END(a.cxml) -->"

        result = splice_fragments(
            document,
            [Fragment("a.cxml", nested), Fragment("b.cxml", "B")],
        )

        assert result.applied == ("a.cxml", "b.cxml")
        assert "\nB\n" in result.document

    def test_declared_fragment_without_markers_keeps_the_master_well_formed(
        self,
    ) -> None:
        declared = '<?xml version="1.0" encoding="UTF-8"?>\n<Objects/>'
        fragment = Fragment("a.cxml", declared)

        result = splice_fragments(MASTER, [fragment])

        assert "<?xml" not in result.document
        assert canonicalize_xml(result.document).startswith("<Root>")
