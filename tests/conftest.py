"""Pytest fixtures for varometer tests."""

import gzip
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from varometer.client import VarOmeterClient
from varometer.config import Settings
from varometer.logging_config import reset_logging

VCF_TEXT = (
    "##fileformat=VCFv4.2\n"
    "##source=test\n"
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\n"
    "chr1\t10177\trs367896724\tA\tAC\t.\tPASS\t.\n"
    "1\t10235\t.\tT\tTA,G\t.\tPASS\t.\n"
    "chr7\t55000\t\tG\tA\t.\tPASS\t.\n"
)


def make_response(
    status: int = 200,
    payload: Any = None,
    text: str | None = None,
    content_type: str = "application/json; charset=utf-8",
) -> MagicMock:
    """Build a fake requests.Response."""
    response = MagicMock()
    response.status_code = status
    response.headers = {"Content-Type": content_type}
    response.json.return_value = payload
    if text is None:
        text = "" if payload is None else str(payload)
    response.text = text
    return response


@pytest.fixture
def vcf_file(tmp_path: Path) -> Path:
    """Plain VCF with three variants (rsID, missing '.', empty ID)."""
    path = tmp_path / "sample.vcf"
    path.write_text(VCF_TEXT)
    return path


@pytest.fixture
def gzipped_vcf_file(tmp_path: Path) -> Path:
    """Gzip-compressed VCF saved under a plain .vcf name."""
    path = tmp_path / "disguised.vcf"
    with gzip.open(path, "wt") as f:
        f.write(VCF_TEXT)
    return path


@pytest.fixture
def settings() -> Settings:
    return Settings(base_url="https://varometer.test", api_key="test-key")


@pytest.fixture
def session() -> MagicMock:
    """Mock requests.Session with a real headers dict."""
    mock_session = MagicMock()
    mock_session.headers = {}
    return mock_session


@pytest.fixture
def sleeps() -> list[float]:
    """Records delays passed to the client's sleep function."""
    return []


@pytest.fixture
def client(settings: Settings, session: MagicMock, sleeps: list[float]) -> VarOmeterClient:
    return VarOmeterClient(settings, session=session, sleep=sleeps.append)


@pytest.fixture(autouse=True)
def _clean_logging():
    yield
    reset_logging()
