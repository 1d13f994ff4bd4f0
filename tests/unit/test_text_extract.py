"""
Unit tests for legacy raw text field extraction
"""

import pytest

from guitar_repair_core.engine.text_extract import (
    UNKNOWN,
    extract_customer_name,
    extract_date,
    extract_serial_number,
    resolve_customer_name,
    resolve_date,
    resolve_serial_number,
)


@pytest.mark.unit
class TestExtraction:
    """Named patterns against literal raw text blocks"""

    @pytest.mark.parametrize("raw, expected", [
        ("2019.4.12\n田中 様\nGibson", "田中"),
        ("田中様 ご依頼", "田中"),
        ("Customer: 山田 様", "Customer: 山田"),
        ("no honorific here", None),
        ("", None),
    ])
    def test_customer_name(self, raw, expected):
        assert extract_customer_name(raw) == expected

    @pytest.mark.parametrize("raw, expected", [
        ("2019.4.12\n田中 様", "2019.4.12"),
        ("受付 2021.12.1 返却 2021.12.20", "2021.12.1"),
        ("2019/4/12", None),
        ("", None),
    ])
    def test_date(self, raw, expected):
        assert extract_date(raw) == expected

    @pytest.mark.parametrize("raw, expected", [
        ("Model: ES-335\nSerial: 90123456  \nSymptoms", "90123456"),
        ("serial:AB-1", "AB-1"),
        ("SERIAL:   X9", "X9"),
        ("no serial", None),
    ])
    def test_serial_number(self, raw, expected):
        assert extract_serial_number(raw) == expected


@pytest.mark.unit
class TestResolution:
    """Field first, then raw text, then the fallback"""

    def test_field_wins_over_raw_text(self):
        assert resolve_customer_name("佐藤", "田中 様") == "佐藤"
        assert resolve_date("2024.1.1", "2019.4.12") == "2024.1.1"
        assert resolve_serial_number("S1", "Serial: S2") == "S1"

    def test_blank_or_unknown_field_falls_back_to_raw_text(self):
        assert resolve_customer_name("", "田中 様") == "田中"
        assert resolve_customer_name(UNKNOWN, "田中 様") == "田中"
        assert resolve_date(None, "2019.4.12") == "2019.4.12"
        assert resolve_serial_number(None, "Serial: S2") == "S2"

    def test_nothing_found(self):
        assert resolve_customer_name(None, "") == UNKNOWN
        assert resolve_date(None, "no date") == UNKNOWN
        assert resolve_serial_number(None, "nothing") == ""
