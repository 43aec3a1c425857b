"""
Tests unitarios para value_canonicalizer.py.

Verifica que cada variante de FieldValue produce un string determinista y
que ningún valor levanta excepción.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

import pytest

from attachment_transfer.application.services.value_canonicalizer import (
    canonicalize,
    is_valid_match_field,
)
from attachment_transfer.domain.entities.field_values import (
    AttachmentEntry,
    AttachmentListValue,
    DateValue,
    DecimalValue,
    FileListValue,
    GuidListValue,
    GuidValue,
    IntegerListValue,
    IntegerValue,
    ScoringGroup,
    ScoringGroupListValue,
    StringListValue,
    StringValue,
    TimeSpanData,
    TimeSpanValue,
    UnsupportedValue,
)
from attachment_transfer.domain.entities.records import FieldDefinition, FieldType

GUID_A = UUID("aaaaaaaa-0000-0000-0000-000000000001")
GUID_B = UUID("bbbbbbbb-0000-0000-0000-000000000002")


class TestCanonicalizeScalars:
    """Tests para valores escalares."""

    def test_string(self) -> None:
        assert canonicalize(StringValue("ABC123")) == "ABC123"

    def test_integer(self) -> None:
        assert canonicalize(IntegerValue(42)) == "42"

    def test_decimal_uses_fixed_point(self) -> None:
        """Verifica que un Decimal con exponente no sale en notación científica."""
        assert canonicalize(DecimalValue(Decimal("1E+2"))) == "100"
        assert canonicalize(DecimalValue(Decimal("12.50"))) == "12.50"

    def test_date_is_iso_utc(self) -> None:
        value = DateValue(datetime(2024, 3, 5, 14, 30, tzinfo=timezone.utc))

        assert canonicalize(value) == "2024-03-05T14:30:00Z"

    def test_guid(self) -> None:
        assert canonicalize(GuidValue(GUID_A)) == str(GUID_A)

    @pytest.mark.parametrize(
        "value",
        [StringValue(None), IntegerValue(None), DecimalValue(None), DateValue(None), GuidValue(None)],
    )
    def test_null_values_render_empty(self, value) -> None:
        """Verifica que un valor nulo se vuelve string vacío."""
        assert canonicalize(value) == ""


class TestCanonicalizeLists:
    """Tests para valores de lista."""

    def test_string_list_keeps_order(self) -> None:
        assert canonicalize(StringListValue(("b", "a"))) == "b, a"

    def test_order_matters(self) -> None:
        """Verifica que el mismo contenido en distinto orden da strings distintos."""
        first = canonicalize(GuidListValue((GUID_A, GUID_B)))
        second = canonicalize(GuidListValue((GUID_B, GUID_A)))

        assert first != second
        assert first == f"{GUID_A}, {GUID_B}"

    def test_integer_list(self) -> None:
        assert canonicalize(IntegerListValue((1, 2, 3))) == "1, 2, 3"

    def test_file_list(self) -> None:
        assert canonicalize(FileListValue((10, 20))) == "10, 20"

    def test_empty_list(self) -> None:
        assert canonicalize(StringListValue(())) == ""


class TestCanonicalizeStructured:
    """Tests para valores compuestos."""

    def test_time_span(self) -> None:
        value = TimeSpanValue(
            TimeSpanData(
                quantity=Decimal("2"),
                increment="Days",
                recurrence="None",
                end_by_date=None,
                end_after_occurrences=3,
            )
        )

        assert canonicalize(value) == (
            "Quantity: 2, Increment: Days, Recurrence: None, EndByDate: , EndAfterOccurrences: 3"
        )

    def test_attachment_list(self) -> None:
        value = AttachmentListValue(
            (
                AttachmentEntry(file_id=1, file_name="a.pdf", notes="n1"),
                AttachmentEntry(file_id=2, file_name="b.pdf", notes=None),
            )
        )

        assert canonicalize(value) == (
            "FileId: 1, FileName: a.pdf, Notes: n1, FileId: 2, FileName: b.pdf, Notes: "
        )

    def test_scoring_group_list(self) -> None:
        value = ScoringGroupListValue(
            (ScoringGroup(list_value_id=GUID_A, name="Riesgo", score=Decimal("3"), maximum_score=Decimal("5")),)
        )

        assert canonicalize(value) == (
            f"ListValueId: {GUID_A}, Name: Riesgo, Score: 3, MaximumScore: 5"
        )

    def test_unsupported_value_renders_sentinel(self) -> None:
        """Verifica que un tipo desconocido no falla y se identifica en el texto."""
        assert canonicalize(UnsupportedValue("Hologram", raw={"x": 1})) == (
            "Unsupported ResultValueType: Hologram"
        )

    def test_deterministic(self) -> None:
        value = AttachmentListValue((AttachmentEntry(file_id=7, file_name="x"),))

        assert canonicalize(value) == canonicalize(value)


class TestIsValidMatchField:
    """Tests para is_valid_match_field()."""

    @pytest.mark.parametrize(
        "field_type",
        [FieldType.TEXT, FieldType.NUMBER, FieldType.DATE, FieldType.AUTO_NUMBER],
    )
    def test_supported_types(self, field_type: FieldType) -> None:
        field = FieldDefinition(id=1, app_id=1, name="Match", type=field_type)

        assert is_valid_match_field(field) is True

    @pytest.mark.parametrize(
        "field_type",
        [FieldType.LIST, FieldType.ATTACHMENT, FieldType.REFERENCE, FieldType.UNKNOWN],
    )
    def test_unsupported_types(self, field_type: FieldType) -> None:
        field = FieldDefinition(id=1, app_id=1, name="Match", type=field_type)

        assert is_valid_match_field(field) is False

    def test_formula_with_text_output_is_valid(self) -> None:
        field = FieldDefinition(id=1, app_id=1, name="F", type=FieldType.FORMULA, output_type="Text")

        assert is_valid_match_field(field) is True

    def test_formula_with_list_output_is_invalid(self) -> None:
        field = FieldDefinition(id=1, app_id=1, name="F", type=FieldType.FORMULA, output_type="ListValue")

        assert is_valid_match_field(field) is False

    def test_missing_field(self) -> None:
        assert is_valid_match_field(None) is False
