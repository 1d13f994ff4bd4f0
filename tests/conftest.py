"""
Pytest configuration and fixtures
"""

import os
import tempfile
from pathlib import Path

import pytest

# Configure the app before api.config is imported anywhere
_SCRATCH = Path(tempfile.mkdtemp(prefix="repair-tests-"))
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("REPAIR_DB_PATH", str(_SCRATCH / "repair_history.json"))
os.environ.setdefault("REPAIR_PDF_PATH", str(_SCRATCH / "repair_catalog.pdf"))

from guitar_repair_core.infra import GroupingCache, RecordStore  # noqa: E402
from guitar_repair_core.models import WorkItemRecord  # noqa: E402

RAW_NEW = (
    "Date: 2023.11.3\n"
    "Customer: 山田 様\n"
    "Brand: Fender\n"
    "Model: Fender Stratocaster\n"
    "Serial: US12345\n"
    "Symptoms: ナットの溝が減って開放弦がビビる\n"
    "\n"
    "\n"
    "Work Items:\n"
    "- ナット交換: 10000\n"
    "- 弦交換: 1500\n"
    "Total: 11500"
)
RAW_A = "2019.4.12\n田中 様\nGibson Les Paul\nナット交換、フレットすり合わせ\n合計 15000"
RAW_B = "2020.1.5\n佐藤 様\nMartin D-28\nSerial: 123456\nブリッジ浮き"
RAW_C = "鈴木 様\nFender Jazz Bass\nジャックのガリ"
RAW_D = "2018.7.30\n高橋 様\nYamaha FG\n弦高調整"


@pytest.fixture
def new_case_rows():
    """Rows of a case saved through the form: shared id and structured fields"""
    common = {
        "id": "case-001",
        "category": "新規登録",
        "categories": ["新規登録"],
        "symptoms": "ナットの溝が減って開放弦がビビる",
        "model": "Fender Stratocaster",
        "raw_text": RAW_NEW,
        "date": "2023.11.3",
        "customer_name": "山田",
        "brand": "Fender",
        "serial_number": "US12345",
        "request_details": "",
        "proposal_content": "",
    }
    return [
        dict(common, detailed_work="ナット交換", price=10000),
        dict(common, detailed_work="弦交換", price=1500),
    ]


@pytest.fixture
def legacy_rows():
    """Imported rows: no id, no date field, metadata only inside raw_text"""
    return [
        {
            "category": "ナット",
            "categories": ["ナット"],
            "symptoms": "開放弦がビビる",
            "detailed_work": "●ナット交換 (牛骨)",
            "price": 10000,
            "model": "Gibson Les Paul",
            "raw_text": RAW_A,
            "page": 12,
        },
        {
            "category": "フレット",
            "categories": ["フレット"],
            "symptoms": "開放弦がビビる",
            "detailed_work": "フレットすり合わせ",
            "price": 8000,
            "case_total_price": 15000,
            "model": "Gibson Les Paul",
            "raw_text": RAW_A,
        },
        {
            "category": "ブリッジ",
            "categories": ["ブリッジ"],
            "symptoms": "ブリッジが浮いている",
            "detailed_work": "ブリッジ剥がれ接着",
            "price": 20000,
            "model": "Martin D-28",
            "raw_text": RAW_B,
        },
        {
            "category": "電装",
            "categories": ["電装"],
            "symptoms": "ジャックのガリ",
            "detailed_work": "ジャック交換",
            "price": 3000,
            "model": "Fender Jazz Bass",
            "raw_text": RAW_C,
        },
        {
            "category": "調整",
            "categories": ["調整"],
            "symptoms": "弦高が高い",
            "detailed_work": "弦高調整",
            "price": 0,
            "case_total_price": 0,
            "model": "Yamaha FG",
            "raw_text": RAW_D,
        },
    ]


@pytest.fixture
def sample_rows(new_case_rows, legacy_rows):
    """Store order: newest saved case first, then the legacy import"""
    return new_case_rows + legacy_rows


@pytest.fixture
def sample_records(sample_rows):
    return [WorkItemRecord.from_dict(row) for row in sample_rows]


@pytest.fixture
def store(tmp_path):
    """Empty record store in a temporary directory (file not created yet)"""
    return RecordStore(tmp_path / "repair_history.json")


@pytest.fixture
def seeded_store(store, sample_records):
    store.write_all(sample_records)
    return store


@pytest.fixture
def pdf_file(tmp_path):
    path = tmp_path / "repair_catalog.pdf"
    path.write_bytes(b"%PDF-1.4\n" + bytes(range(256)) * 4 + b"\n%%EOF\n")
    return path


def _client_for(store, pdf_path):
    from fastapi.testclient import TestClient

    from api.main import app
    from api.services.document_service import DocumentService, get_document_service
    from api.services.estimate_service import EstimateService, get_estimate_service
    from api.services.repair_service import RepairService, get_repair_service

    repair_service = RepairService(store, GroupingCache())
    estimate_service = EstimateService(store)
    document_service = DocumentService(pdf_path)

    app.dependency_overrides[get_repair_service] = lambda: repair_service
    app.dependency_overrides[get_estimate_service] = lambda: estimate_service
    app.dependency_overrides[get_document_service] = lambda: document_service
    return TestClient(app), app


@pytest.fixture
def client(seeded_store, pdf_file):
    """TestClient over a seeded temporary store and a small PDF"""
    test_client, app = _client_for(seeded_store, pdf_file)
    with test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def empty_client(store, tmp_path):
    """TestClient whose record store file and PDF do not exist"""
    test_client, app = _client_for(store, tmp_path / "missing.pdf")
    with test_client:
        yield test_client
    app.dependency_overrides.clear()


# Test markers
def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (file I/O, cache)"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests (HTTP surface)"
    )
