"""Tests for the property parser."""

import pytest

from calpipe.ics import ContentLine, MalformedProperty, Parameter, parse_content_line
from calpipe.ics.parser import decode_param_value


class TestParseContentLine:
    """Test splitting logical lines into properties."""

    def test_simple_property(self) -> None:
        assert parse_content_line("SUMMARY:Team sync") == ContentLine("SUMMARY", (), "Team sync")

    def test_value_may_contain_colons(self) -> None:
        prop = parse_content_line("URL:https://example.com/a:b")
        assert prop.value == "https://example.com/a:b"

    def test_empty_value(self) -> None:
        assert parse_content_line("DESCRIPTION:").value == ""

    def test_parameters_keep_order(self) -> None:
        prop = parse_content_line("DTSTART;VALUE=DATE-TIME;TZID=Europe/Copenhagen:20250101T090000")
        assert prop.params == (
            Parameter("VALUE", ("DATE-TIME",)),
            Parameter("TZID", ("Europe/Copenhagen",)),
        )
        assert prop.value == "20250101T090000"

    def test_multi_valued_and_quoted_parameters(self) -> None:
        prop = parse_content_line(
            'ATTENDEE;DELEGATED-TO="mailto:a@example.com","mailto:b@example.com";ROLE=CHAIR:mailto:c@example.com'
        )
        assert prop.param("delegated-to") == ("mailto:a@example.com", "mailto:b@example.com")
        assert prop.param("ROLE") == ("CHAIR",)
        assert prop.value == "mailto:c@example.com"

    def test_quoted_value_hides_separators(self) -> None:
        prop = parse_content_line('X-THING;LABEL="a;b:c,d":value')
        assert prop.param("LABEL") == ("a;b:c,d",)
        assert prop.value == "value"

    def test_empty_parameter_value(self) -> None:
        assert parse_content_line("X-A;P=:v").param("P") == ("",)

    def test_names_stored_verbatim(self) -> None:
        prop = parse_content_line("summary;cn=x:hello")
        assert prop.name == "summary"
        assert prop.matches("SUMMARY")
        assert prop.param("CN") == ("x",)

    def test_rfc6868_escapes_are_decoded(self) -> None:
        prop = parse_content_line("ATTENDEE;CN=George Herman ^'Babe^' Ruth:mailto:babe@example.com")
        assert prop.param("CN") == ('George Herman "Babe" Ruth',)

    def test_unknown_caret_sequence_is_literal(self) -> None:
        assert decode_param_value("a^b^^c^nd") == "a^b^c\nd"

    @pytest.mark.parametrize(
        "text",
        [
            "SUMMARY no separator",
            ":no name",
            "DTSTART;VALUE:20250101",
            'X-A;P="unterminated:value',
            'X-A;P=bad"quote:value',
            'X-A;P="ok"junk:value',
            "DTSTART;=DATE:20250101",
            "DTSTART;TZID=Europe/Paris",
        ],
    )
    def test_malformed_lines(self, text: str) -> None:
        with pytest.raises(MalformedProperty):
            parse_content_line(text, line=4, offset=80)

    def test_error_carries_position(self) -> None:
        with pytest.raises(MalformedProperty) as excinfo:
            parse_content_line("BROKEN", line=7, offset=120)
        assert excinfo.value.line == 7
        assert excinfo.value.offset == 120
        assert "line 7" in str(excinfo.value)
