from datetime import date, datetime

import pytest

from app.services.dates import is_date_like, parse_date


def test_slash_short_tokens_are_day_first():
    assert parse_date("15/01/2024") == date(2024, 1, 15)


def test_impossible_day_first_falls_back_to_month_first():
    assert parse_date("01/15/2024") == date(2024, 1, 15)


def test_ambiguous_slash_date_follows_configured_order():
    assert parse_date("03/04/2024") == date(2024, 4, 3)
    assert parse_date("03/04/2024", date_order="MDY") == date(2024, 3, 4)


def test_two_digit_year_maps_to_current_century():
    assert parse_date("5/1/24") == date(2024, 1, 5)


def test_long_leading_token_parses_whole_string():
    assert parse_date("2024/01/15") == date(2024, 1, 15)


def test_dash_separated_iso_date():
    assert parse_date("2024-02-29") == date(2024, 2, 29)


def test_dash_with_wrong_token_count_is_invalid():
    assert parse_date("2024-02") is None


@pytest.mark.parametrize("value", ["not-a-date", "", None, "Status", "Mon", "31/02/2024"])
def test_invalid_values_return_none(value):
    assert parse_date(value) is None


def test_free_text_date():
    assert parse_date("March 5, 2024") == date(2024, 3, 5)


def test_date_and_datetime_pass_through():
    assert parse_date(date(2024, 1, 2)) == date(2024, 1, 2)
    assert parse_date(datetime(2024, 1, 2, 9, 30)) == date(2024, 1, 2)


def test_is_date_like():
    assert is_date_like("01/02/2024")
    assert is_date_like("2024-01-02")
    assert not is_date_like("Status")
    assert not is_date_like("Roll No")
    assert not is_date_like("")


def test_fallback_respects_date_order():
    assert parse_date("05/01/2024 10:30") == date(2024, 1, 5)
    assert parse_date("05/01/2024 10:30", date_order="MDY") == date(2024, 5, 1)
    assert parse_date("15/01/2024 10:30") == date(2024, 1, 15)


def test_year_first_slash_date_ignores_day_first():
    assert parse_date("2024/01/05") == date(2024, 1, 5)


@pytest.mark.parametrize("value", ["Jan 2024", "15 March", "10:30", "1"])
def test_partial_dates_are_invalid(value):
    assert parse_date(value) is None
