"""
Unit tests for barcode payload classification.
"""

import pytest

from papercopy_toolkit.core.models import IdentifierTriple, Symbology
from papercopy_toolkit.scanning.payload import (
    BareCopyTag,
    DisqualifierMatch,
    IdentifierMatch,
    parse_payload,
)


class TestIdentifierPayload:

    @pytest.mark.parametrize("copy_id,question_id,attempt_id", [
        ("0", "0", "0"), ("12", "3", "1"), ("1045", "22", "7"), ("007", "01", "10"),
    ])
    def test_parse_payload_when_identifier_then_literal_components(
        self, copy_id, question_id, attempt_id
    ):
        match = parse_payload(f"{copy_id}|{question_id}|{attempt_id}")

        assert match == IdentifierMatch(IdentifierTriple(copy_id, question_id, attempt_id))

    def test_parse_payload_when_identifier_on_linear_code_then_still_identifier(self):
        match = parse_payload("12|3|1", Symbology.LINEAR_ID)

        assert isinstance(match, IdentifierMatch)

    @pytest.mark.parametrize("payload", ["12|3", "12|3|1|4", "x12|3|1", "12|3|1 ", "12||1"])
    def test_parse_payload_when_partial_identifier_then_not_identifier(self, payload):
        assert not isinstance(parse_payload(payload), IdentifierMatch)


class TestDisqualifierPayload:

    @pytest.mark.parametrize("grade", [0, 7, 10, 42])
    def test_parse_payload_when_grade_code_then_disqualifier(self, grade):
        assert parse_payload(f"GRADE{grade}") == DisqualifierMatch(grade)

    @pytest.mark.parametrize("payload", ["GRADE", "grade7", "GRADE7x", "XGRADE7", "12|3|1"])
    def test_parse_payload_when_not_grade_code_then_no_disqualifier(self, payload):
        assert not isinstance(parse_payload(payload), DisqualifierMatch)

    def test_parse_payload_when_grade_code_on_linear_code_then_disqualifier(self):
        assert parse_payload("GRADE3", Symbology.LINEAR_ID) == DisqualifierMatch(3)


class TestBareCopyTag:

    def test_parse_payload_when_linear_then_bare_copy_tag(self):
        assert parse_payload("1045", Symbology.LINEAR_ID) == BareCopyTag("1045")

    def test_parse_payload_when_qr_then_not_copy_tag(self):
        assert parse_payload("1045", Symbology.QR) is None

    def test_parse_payload_when_other_symbology_then_unrecognized(self):
        assert parse_payload("1045", Symbology.OTHER) is None

    def test_parse_payload_when_linear_empty_then_unrecognized(self):
        assert parse_payload("", Symbology.LINEAR_ID) is None


class TestUnrecognizedPayload:

    @pytest.mark.parametrize("payload", ["", "hello", "https://example.org", "GRADE-1"])
    def test_parse_payload_when_qr_noise_then_none(self, payload):
        assert parse_payload(payload) is None
