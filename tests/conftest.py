"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from fastapi.testclient import TestClient

from backoffice.api.main import create_app
from backoffice.domain.fees import DEFAULT_FEE_CONFIGURATION
from backoffice.domain.models import (
    Address,
    BankDetails,
    FeeSchedule,
    Financials,
    KycRecord,
    MerchantSnapshot,
    MobileMoneyWallet,
)


AS_OF = date(2025, 6, 30)


@pytest.fixture
def as_of() -> date:
    """Fixed scoring date so age-based sub-scores are reproducible"""
    return AS_OF


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def domestic_schedule() -> FeeSchedule:
    """GHS 2.5% + 0.30, min 0.10, max 50.00"""
    return DEFAULT_FEE_CONFIGURATION.domestic


@pytest.fixture
def international_schedule() -> FeeSchedule:
    """GHS 3.5% + 0.50, min 0.20, max 100.00"""
    return DEFAULT_FEE_CONFIGURATION.international


@pytest.fixture
def best_merchant() -> MerchantSnapshot:
    """Fully KYC'd, mature, modest volume, compliant, unflagged"""
    return MerchantSnapshot(
        merchant_id="m_established",
        status="active",
        kyc=KycRecord(
            status="approved",
            documents_submitted=6,
            documents_verified=6,
            submitted_at=AS_OF - timedelta(days=20),
        ),
        created_at=date(2023, 1, 15),
        financials=Financials(
            total_transactions=500,
            total_revenue=Decimal("250000"),
            monthly_volume=Decimal("20000"),
        ),
        registration_number="CS123456789",
        tax_id="C0012345678",
        business_type="retail",
        email="accounts@kofi-provisions.com.gh",
        phone="+233201234567",
        address=Address(street="12 Liberation Road", city="Accra", country="Ghana"),
        bank_details=BankDetails(account_number="1441000123456", bank_name="GCB Bank"),
        sanctions_screening="clear",
    )


@pytest.fixture
def worst_merchant() -> MerchantSnapshot:
    """Every input present and at its riskiest"""
    return MerchantSnapshot(
        merchant_id="m_worst",
        status="closed",
        kyc=KycRecord(
            status="rejected",
            documents_submitted=0,
            documents_verified=0,
            submitted_at=AS_OF - timedelta(days=180),
        ),
        created_at=AS_OF - timedelta(days=2),
        financials=Financials(
            total_transactions=1,
            total_revenue=Decimal("60000"),
            monthly_volume=Decimal("10000000"),
        ),
        business_type="Crypto Exchange",
        sanctions_screening="confirmed_match",
        flags=("fraud_suspected", "aml_review", "chargebacks", "suspicious_activity"),
    )


@pytest.fixture
def new_merchant() -> MerchantSnapshot:
    """Three days old, KYC started, no transactions yet"""
    return MerchantSnapshot(
        merchant_id="m_new",
        status="pending",
        kyc=KycRecord(
            status="pending",
            documents_submitted=2,
            documents_verified=0,
            submitted_at=AS_OF - timedelta(days=5),
        ),
        created_at=AS_OF - timedelta(days=3),
        financials=Financials(),
        registration_number="BN987654",
        business_type="restaurant",
        email="hello@chopbar.gh",
        phone="+233241112233",
        address=Address(street="4 Oxford Street", city="Accra", country="Ghana"),
        mobile_money=MobileMoneyWallet(number="0241112233", provider="MTN"),
    )
