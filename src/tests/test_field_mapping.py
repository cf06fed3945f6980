"""Tests for header lookup and type coercion helpers."""

import math
from datetime import date, datetime

import pytest

from src.services.field_mapping import (
    get_field_value,
    is_blank,
    is_valid_identifier,
    to_boolean,
    to_date,
    to_identifier,
    to_number,
    to_string,
)
from src.utils.datetime_utils import parse_calendar_date, spreadsheet_serial_to_date


class TestIsBlank:
    """Tests for is_blank()."""

    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n", float("nan")])
    def test_blank_values(self, value):
        assert is_blank(value) is True

    @pytest.mark.parametrize("value", [0, 0.0, False, "0", "x", " a "])
    def test_non_blank_values(self, value):
        assert is_blank(value) is False


class TestConverters:
    """Tests for the per-type converters."""

    def test_to_string_trims(self):
        assert to_string("  Acme Srl  ") == "Acme Srl"

    def test_to_string_drops_integral_float_suffix(self):
        assert to_string(20100.0) == "20100"
        assert to_string(12.5) == "12.5"

    def test_to_number_parses_text(self):
        assert to_number("12.5") == 12.5
        assert to_number(" 7 ") == 7.0

    def test_to_number_accepts_decimal_comma(self):
        assert to_number("12,50") == 12.5

    def test_to_number_invalid_is_none(self):
        assert to_number("abc") is None
        assert to_number(True) is None
        assert to_number(float("nan")) is None

    def test_to_number_passes_numbers_through(self):
        assert to_number(3) == 3
        assert to_number(2.25) == 2.25

    @pytest.mark.parametrize("value", ["true", "TRUE", " True ", "1", 1, 1.0, True])
    def test_to_boolean_true(self, value):
        assert to_boolean(value) is True

    @pytest.mark.parametrize("value", ["false", "FALSE", " false", "0", 0, False])
    def test_to_boolean_false(self, value):
        assert to_boolean(value) is False

    @pytest.mark.parametrize("value", ["yes", "si", "2", "x"])
    def test_to_boolean_other_is_none(self, value):
        assert to_boolean(value) is None

    def test_to_identifier_lowercases_valid_uuid(self):
        value = "  0F8FAD5B-D9CB-469F-A165-70867728950E "
        assert to_identifier(value) == "0f8fad5b-d9cb-469f-a165-70867728950e"

    def test_to_identifier_rejects_malformed(self):
        assert to_identifier("not-a-uuid") is None
        assert to_identifier("12345") is None

    def test_is_valid_identifier(self):
        assert is_valid_identifier("0f8fad5b-d9cb-469f-a165-70867728950e")
        assert not is_valid_identifier(None)
        assert not is_valid_identifier("0f8fad5b-d9cb-469f-a165")


class TestDates:
    """Tests for calendar date parsing."""

    def test_iso_text(self):
        assert to_date("2024-03-01") == date(2024, 3, 1)

    def test_iso_datetime_text(self):
        assert to_date("2024-03-01T10:30:00Z") == date(2024, 3, 1)

    def test_day_first_text(self):
        assert to_date("01/03/2024") == date(2024, 3, 1)
        assert to_date("01.03.2024") == date(2024, 3, 1)

    def test_spreadsheet_serial(self):
        assert to_date(45352) == date(2024, 3, 1)
        assert to_date(45352.75) == date(2024, 3, 1)
        assert to_date("45352") == date(2024, 3, 1)

    def test_serial_counts_from_epoch(self):
        assert spreadsheet_serial_to_date(1) == date(1899, 12, 31)

    def test_non_positive_serial_is_none(self):
        assert spreadsheet_serial_to_date(0) is None
        assert spreadsheet_serial_to_date(-5) is None

    def test_date_objects_pass_through(self):
        assert to_date(date(2023, 1, 2)) == date(2023, 1, 2)
        assert to_date(datetime(2023, 1, 2, 15, 0)) == date(2023, 1, 2)

    def test_garbage_is_none(self):
        assert to_date("next tuesday") is None
        assert parse_calendar_date(True) is None


class TestGetFieldValue:
    """Tests for get_field_value()."""

    HEADERS = ("Ragione Sociale", "ragione_sociale", "ragioneSociale")

    def test_first_spelling_wins(self):
        row = {"Ragione Sociale": "Acme", "ragione_sociale": "Other"}
        assert get_field_value(row, self.HEADERS, to_string) == "Acme"

    def test_blank_spelling_is_skipped(self):
        row = {"Ragione Sociale": "   ", "ragioneSociale": "Acme"}
        assert get_field_value(row, self.HEADERS, to_string) == "Acme"

    def test_absent_is_none(self):
        assert get_field_value({"Other": "x"}, self.HEADERS, to_string) is None

    def test_failed_conversion_does_not_fall_through(self):
        row = {"Importo": "n/a", "importo": "12"}
        assert get_field_value(row, ("Importo", "importo"), to_number) is None

    def test_nan_cell_is_blank(self):
        row = {"Importo": math.nan, "importo": "12"}
        assert get_field_value(row, ("Importo", "importo"), to_number) == 12.0
