"""Shared fixtures for policy-portal tests."""

from __future__ import annotations

import base64

import pytest

from policy_portal.core.config import AppSettings, ExtractionConfig
from policy_portal.models import PolicyDocument, PolicySection
from tests.fakes.fake_extractor import FakePolicyExtractor

# Smallest payload the intake sniffer recognizes as PNG
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 16


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def png_data_url() -> str:
    return "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("ascii")


@pytest.fixture
def sample_policy() -> PolicyDocument:
    """3-section policy with 2, 3 and 1 rules."""
    return PolicyDocument(
        company_name="Acme Trading",
        document_title="Code of Conduct",
        date="2025-03-01",
        sections=(
            PolicySection(title="Integrity", rules=("Be honest.", "Declare conflicts of interest.")),
            PolicySection(
                title="Workplace",
                rules=("Respect colleagues.", "No harassment.", "Be on time."),
            ),
            PolicySection(title="Confidentiality", rules=("Protect customer data.",)),
        ),
    )


@pytest.fixture
def empty_policy() -> PolicyDocument:
    return PolicyDocument(company_name="Acme Trading", document_title="Blank Notice", date="", sections=())


@pytest.fixture
def fake_extractor(sample_policy: PolicyDocument) -> FakePolicyExtractor:
    return FakePolicyExtractor(policy=sample_policy)


@pytest.fixture
def settings() -> AppSettings:
    """Default test settings (fixed key and UTC dates, no real provider)."""
    base = AppSettings()
    return base.model_copy(
        update={
            "extraction": ExtractionConfig(api_key="test-key", model="gemini/test-model"),
            "presentation": base.presentation.model_copy(update={"timezone": "UTC"}),
        }
    )
