"""
Heuristic field extraction from legacy raw text blocks

Legacy rows were imported from an unstructured document and carry their
metadata only inside ``raw_text``. Each field has one named pattern.
"""

import re
from typing import Optional

UNKNOWN = "不明"

# "<anything on one line> 様" - honorific suffix marks the customer name
CUSTOMER_PATTERN = re.compile(r"([^\n]+?)\s*様")

# 2019.4.12 style dates
DATE_PATTERN = re.compile(r"\d{4}\.\d{1,2}\.\d{1,2}")

# "Serial: <rest of line>"
SERIAL_PATTERN = re.compile(r"Serial:\s*([^\n]+)", re.IGNORECASE)


def extract_customer_name(raw_text: str) -> Optional[str]:
    match = CUSTOMER_PATTERN.search(raw_text or "")
    if not match:
        return None
    return match.group(1).strip()


def extract_date(raw_text: str) -> Optional[str]:
    match = DATE_PATTERN.search(raw_text or "")
    return match.group(0) if match else None


def extract_serial_number(raw_text: str) -> Optional[str]:
    match = SERIAL_PATTERN.search(raw_text or "")
    if not match:
        return None
    return match.group(1).strip()


def resolve_customer_name(field_value: Optional[str], raw_text: str) -> str:
    """Structured field first, then the raw text, then 不明."""
    if field_value and field_value != UNKNOWN:
        return field_value
    return extract_customer_name(raw_text) or UNKNOWN


def resolve_date(field_value: Optional[str], raw_text: str) -> str:
    if field_value and field_value != UNKNOWN:
        return field_value
    return extract_date(raw_text) or UNKNOWN


def resolve_serial_number(field_value: Optional[str], raw_text: str) -> str:
    if field_value:
        return field_value
    return extract_serial_number(raw_text) or ""
