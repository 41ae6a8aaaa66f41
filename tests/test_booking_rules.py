"""Tests for input parsing and formatting rules of the dialogs."""

import pytest

from conftest import NOW
from salonbot.errors import StockExceeded, ValidationError
from salonbot.services.booking import (
    check_stock,
    derive_categories,
    format_datetime,
    format_price,
    parse_booking_datetime,
    parse_note,
    parse_quantity,
    parse_stock,
)


class TestBookingDatetime:
    def test_future_moment_is_normalized(self):
        assert parse_booking_datetime("25.12.2025 14:00", NOW) == "2025-12-25T14:00"

    def test_single_digit_parts_and_padding_spaces(self):
        assert parse_booking_datetime("  2.7.2025 9:05 ", NOW) == "2025-07-02T09:05"

    def test_one_minute_after_now_is_accepted(self):
        assert parse_booking_datetime("01.06.2025 12:01", NOW) == "2025-06-01T12:01"

    def test_exactly_now_is_rejected(self):
        with pytest.raises(ValidationError, match="в прошлом"):
            parse_booking_datetime("01.06.2025 12:00", NOW)

    def test_past_moment_is_rejected(self):
        with pytest.raises(ValidationError, match="в прошлом"):
            parse_booking_datetime("25.12.2024 14:00", NOW)

    @pytest.mark.parametrize("text", ["31.02.2026 10:00", "10.13.2026 10:00", "10.10.2026 25:00", "10.10.2026 10:61"])
    def test_impossible_calendar_values_are_rejected(self, text):
        with pytest.raises(ValidationError, match="Неверная дата"):
            parse_booking_datetime(text, NOW)

    @pytest.mark.parametrize(
        "text", ["завтра", "25.12.2025", "14:00", "2025-12-25 14:00", "25.12.2025 14:00 утром", "25/12/2025 14:00"]
    )
    def test_malformed_text_asks_for_format(self, text):
        with pytest.raises(ValidationError, match="ДД.ММ.ГГГГ ЧЧ:ММ"):
            parse_booking_datetime(text, NOW)


class TestQuantity:
    @pytest.mark.parametrize("text,expected", [("1", 1), (" 3 ", 3), ("12", 12)])
    def test_positive_integers(self, text, expected):
        assert parse_quantity(text) == expected

    @pytest.mark.parametrize("text", ["0", "-2", "abc", "1.5", "", "1_0", "+3", "\u0663"])
    def test_rejected_values(self, text):
        with pytest.raises(ValidationError):
            parse_quantity(text)

    @pytest.mark.parametrize("value,expected", [(3, 3), ("3", 3), ("3.00", 3), (None, 0), ("", 0), ("нет", 0)])
    def test_stock_from_api(self, value, expected):
        assert parse_stock(value) == expected

    def test_stock_guard(self):
        check_stock(3, 3)
        with pytest.raises(StockExceeded) as excinfo:
            check_stock(4, 3)
        assert excinfo.value.available == 3
        assert isinstance(excinfo.value, ValidationError)


class TestNote:
    def test_dash_means_no_note(self):
        assert parse_note("-") is None
        assert parse_note(" - ") is None

    def test_other_text_is_kept_verbatim(self):
        assert parse_note("  после 15:00, пожалуйста ") == "  после 15:00, пожалуйста "


class TestCategories:
    def test_first_seen_order_without_duplicates(self):
        services = [
            {"id": 1, "category": "Hair"},
            {"id": 2, "category": "Nails"},
            {"id": 3, "category": "Hair"},
            {"id": 4, "category": ""},
            {"id": 5},
        ]
        assert derive_categories(services) == ["Hair", "Nails"]

    def test_no_categories(self):
        assert derive_categories([{"id": 1, "category": None}, {"id": 2}]) == []


class TestFormatting:
    def test_format_datetime(self):
        assert format_datetime("2025-12-25T14:00") == "25.12.2025 14:00"
        assert format_datetime("2025-12-25 14:00:00") == "25.12.2025 14:00"
        assert format_datetime(None) == "—"
        assert format_datetime("soon") == "soon"

    def test_format_price(self):
        assert format_price(1350.0) == "1350"
        assert format_price("450") == "450"
        assert format_price(99.5) == "99.50"
