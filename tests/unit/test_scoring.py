"""Unit tests for merchant risk scoring logic"""

import pytest
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from backoffice.domain import rules
from backoffice.domain.models import (
    Address,
    BankDetails,
    Financials,
    KycRecord,
    MerchantSnapshot,
    MobileMoneyWallet,
    RiskLevel,
)
from backoffice.domain.scoring import (
    compute_risk_score,
    concerning_components,
    determine_risk_level,
    score_business_maturity,
    score_compliance,
    score_flags,
    score_kyc,
    score_transactions,
    summarize_portfolio,
)


def test_risk_weights_sum_to_one():
    assert sum(rules.RISK_WEIGHTS.values()) == Decimal("1.00")
    assert rules.RISK_WEIGHTS["kyc"] == Decimal("0.30")
    assert rules.RISK_WEIGHTS["flags"] == Decimal("0.10")


@pytest.mark.parametrize(
    "score, level",
    [
        (0, RiskLevel.LOW),
        (24, RiskLevel.LOW),
        (25, RiskLevel.MEDIUM),
        (49, RiskLevel.MEDIUM),
        (50, RiskLevel.HIGH),
        (74, RiskLevel.HIGH),
        (75, RiskLevel.CRITICAL),
        (100, RiskLevel.CRITICAL),
    ],
)
def test_determine_risk_level_bands(score, level):
    """Test level boundaries are inclusive lower bounds at 25/50/75"""
    assert determine_risk_level(score) == level


def test_score_kyc_approved_and_complete(as_of):
    kyc = KycRecord(status="approved", documents_submitted=6, documents_verified=6, submitted_at=as_of)
    assert score_kyc(kyc, as_of) == 0


def test_score_kyc_not_started(as_of):
    """Test an empty KYC record: unknown status 40 + no documents 30 + nothing verified 20"""
    assert score_kyc(KycRecord(), as_of) == 90


def test_score_kyc_rejected_capped_at_100(as_of):
    kyc = KycRecord(status="rejected", submitted_at=as_of - timedelta(days=200))
    assert score_kyc(kyc, as_of) == 100


def test_score_kyc_more_verified_documents_lower_risk(as_of):
    """Test KYC risk falls strictly as more submitted documents are verified"""
    scores = [
        score_kyc(KycRecord(status="pending", documents_submitted=4, documents_verified=verified), as_of)
        for verified in range(5)
    ]
    assert scores == [60, 55, 50, 45, 40]


def test_score_kyc_verified_count_capped_by_submitted(as_of):
    over_reported = KycRecord(status="submitted", documents_submitted=3, documents_verified=9)
    assert score_kyc(over_reported, as_of) == 15 + 15 + 0


@pytest.mark.parametrize("days_ago, points", [(10, 0), (30, 0), (31, 5), (90, 5), (91, 10)])
def test_score_kyc_submission_staleness(as_of, days_ago, points):
    kyc = KycRecord(
        status="approved",
        documents_submitted=6,
        documents_verified=6,
        submitted_at=as_of - timedelta(days=days_ago),
    )
    assert score_kyc(kyc, as_of) == points


@pytest.mark.parametrize("age_days, points", [(0, 25), (6, 25), (7, 20), (29, 20), (30, 10), (179, 5), (180, 0)])
def test_score_business_maturity_account_age(best_merchant, as_of, age_days, points):
    merchant = replace(best_merchant, created_at=as_of - timedelta(days=age_days))
    assert score_business_maturity(merchant, as_of) == points


def test_score_business_maturity_profile_gaps(best_merchant, as_of):
    """Test registration, business type, and contact gaps add up"""
    no_tax_id = replace(best_merchant, tax_id=None)
    assert score_business_maturity(no_tax_id, as_of) == 15

    blank_registration = replace(best_merchant, registration_number="   ")
    assert score_business_maturity(blank_registration, as_of) == 25

    marketplace = replace(best_merchant, business_type="Online Marketplace")
    assert score_business_maturity(marketplace, as_of) == 15

    gambling = replace(best_merchant, business_type="Sports GAMBLING", email=None, phone="")
    assert score_business_maturity(gambling, as_of) == 25 + 15 + 10


def test_score_transactions():
    """Test thin history, large tickets, and volume spikes"""
    assert score_transactions(Financials()) == 20
    assert score_transactions(Financials(total_transactions=5, total_revenue=Decimal("500"))) == 15
    assert score_transactions(Financials(total_transactions=49, total_revenue=Decimal("4900"))) == 10

    large_tickets = Financials(total_transactions=100, total_revenue=Decimal("3000000"))
    assert score_transactions(large_tickets) == 15

    very_large_tickets = Financials(total_transactions=100, total_revenue=Decimal("6000000"))
    assert score_transactions(very_large_tickets) == 25

    # avg 100/txn, 5000 this month implies 50 transactions against 20 lifetime
    spike = Financials(total_transactions=20, total_revenue=Decimal("2000"), monthly_volume=Decimal("5000"))
    assert score_transactions(spike) == 10 + 30


def test_score_compliance(best_merchant):
    assert score_compliance(best_merchant) == 0
    assert score_compliance(replace(best_merchant, status="suspended")) == 60
    assert score_compliance(replace(best_merchant, status="archived")) == 40
    assert score_compliance(replace(best_merchant, sanctions_screening="potential_match")) == 30
    assert score_compliance(replace(best_merchant, sanctions_screening=None)) == 10

    partial = replace(
        best_merchant,
        address=Address(street="", city="Kumasi", country=None),
        bank_details=None,
        mobile_money=MobileMoneyWallet(number="0551234567", provider="Vodafone"),
    )
    assert score_compliance(partial) == 20 + 10

    incomplete_bank = replace(best_merchant, bank_details=BankDetails(account_number="123"))
    assert score_compliance(incomplete_bank) == 30


def test_score_compliance_capped_at_100(worst_merchant):
    assert score_compliance(worst_merchant) == 100


def test_score_flags():
    assert score_flags(()) == 0
    assert score_flags(("chargebacks",)) == 15
    assert score_flags(("AML watchlist",)) == 15 + 25
    assert score_flags(("fraud", "suspicious login", "aml", "chargebacks")) == 50 + 50


def test_best_merchant_is_low_risk(best_merchant, as_of):
    """Test fully KYC'd, mature, compliant, unflagged merchant"""
    assessment = compute_risk_score(best_merchant, as_of)

    assert assessment.total_score == 0
    assert assessment.level == RiskLevel.LOW
    assert assessment.factors == []
    assert assessment.recommendations == []


def test_worst_merchant_is_critical(worst_merchant, as_of):
    """Test every component at its worst; 92.5 rounds half-up to 93"""
    assessment = compute_risk_score(worst_merchant, as_of)
    components = assessment.components

    assert components.kyc_score == 100
    assert components.business_maturity_score == 100
    assert components.transaction_score == 70
    assert components.compliance_score == 100
    assert components.flags_score == 100
    assert assessment.total_score == 93
    assert assessment.level == RiskLevel.CRITICAL


def test_worst_merchant_factors_ordered_by_component_risk(worst_merchant, as_of):
    """Test one factor per concerning component, riskiest first, ties in weight order"""
    assessment = compute_risk_score(worst_merchant, as_of)

    assert assessment.factors == [
        "KYC documents were rejected",
        "New merchant account (less than 30 days old)",
        "Confirmed sanctions screening match",
        "4 active risk flags (3 fraud/AML related)",
        "Unusual spike in monthly transaction volume",
    ]
    assert assessment.recommendations == [
        "Immediate manual review required",
        "Set conservative transaction limits",
        "Request complete KYC documentation",
        "Confirm business registration and tax details",
        "Resolve outstanding account compliance issues",
        "Investigate and resolve active risk flags",
        "Monitor transactions closely",
    ]


def test_new_merchant_is_medium_risk(new_merchant, as_of):
    """Test a three-day-old merchant mid-KYC"""
    assessment = compute_risk_score(new_merchant, as_of)

    assert assessment.components.kyc_score == 70
    assert assessment.components.business_maturity_score == 40
    assert assessment.components.transaction_score == 20
    assert assessment.components.compliance_score == 40
    assert assessment.components.flags_score == 0
    assert assessment.total_score == 40
    assert assessment.level == RiskLevel.MEDIUM
    assert assessment.factors == ["Insufficient KYC documents submitted"]
    assert assessment.recommendations == [
        "Review and adjust transaction limits as needed",
        "Request complete KYC documentation",
        "Verify submitted KYC documents",
    ]


def test_missing_kyc_scores_maximum(best_merchant, as_of):
    """Test a snapshot without any KYC record gets worst-case KYC risk"""
    assessment = compute_risk_score(replace(best_merchant, kyc=None), as_of)

    assert assessment.components.kyc_score == 100
    assert assessment.total_score == 30
    assert assessment.level == RiskLevel.MEDIUM
    assert assessment.factors == ["No KYC data available"]


def test_empty_snapshot_never_raises(as_of):
    """Test a bare merchant ID still yields a complete assessment"""
    assessment = compute_risk_score(MerchantSnapshot(merchant_id="m_blank"), as_of)

    assert assessment.components.kyc_score == 100
    assert assessment.components.business_maturity_score == 100
    assert assessment.components.transaction_score == 100
    assert assessment.components.compliance_score == 100
    assert assessment.components.flags_score == 0
    assert assessment.total_score == 90
    assert assessment.level == RiskLevel.CRITICAL
    assert assessment.factors == [
        "No KYC data available",
        "No account creation date available",
        "No transaction data available",
        "No merchant status available",
    ]


def test_active_high_risk_merchant_suspension_recommended(worst_merchant, as_of):
    active = replace(worst_merchant, status="active", has_transaction_limits=True)
    recommendations = compute_risk_score(active, as_of).recommendations

    assert recommendations[:3] == [
        "Immediate manual review required",
        "Consider tightening existing transaction limits",
        "Consider suspending account until review is complete",
    ]


def test_verify_documents_recommended_only_when_unverified(best_merchant, as_of):
    """Test the verification action needs submitted documents still awaiting review"""
    unverified = KycRecord(status="rejected", documents_submitted=3, documents_verified=1, submitted_at=as_of)
    all_verified = KycRecord(status="rejected", documents_submitted=3, documents_verified=3, submitted_at=as_of)
    nothing_submitted = KycRecord(status="rejected", submitted_at=as_of)

    def kyc_actions(kyc):
        recommendations = compute_risk_score(replace(best_merchant, kyc=kyc), as_of).recommendations
        return [r for r in recommendations if "KYC" in r]

    assert kyc_actions(unverified) == ["Request complete KYC documentation", "Verify submitted KYC documents"]
    assert kyc_actions(all_verified) == ["Request complete KYC documentation"]
    assert kyc_actions(nothing_submitted) == ["Request complete KYC documentation"]
    assert kyc_actions(None) == ["Request complete KYC documentation"]


def test_datetime_inputs_scored_like_dates(best_merchant, as_of):
    """Test datetime timestamps and as_of mix with plain dates without raising"""
    expected = compute_risk_score(best_merchant, as_of)

    aware_created = replace(best_merchant, created_at=datetime(2023, 1, 15, 9, 30, tzinfo=timezone.utc))
    assert compute_risk_score(aware_created, as_of) == expected

    naive_submitted = replace(
        best_merchant,
        kyc=replace(best_merchant.kyc, submitted_at=datetime(2025, 6, 10, 12, 0)),
    )
    assert compute_risk_score(naive_submitted, as_of) == expected

    assert compute_risk_score(best_merchant, datetime(2025, 6, 30, 8, 0)) == expected


def test_datetime_inputs_keep_age_bands(best_merchant, as_of):
    """Test age and staleness bands still apply to datetime inputs"""
    new_account = replace(best_merchant, created_at=datetime(2025, 6, 28, 23, 0, tzinfo=timezone.utc))
    assert score_business_maturity(new_account, datetime(2025, 6, 30, 1, 0)) == 25

    stale = KycRecord(
        status="approved",
        documents_submitted=6,
        documents_verified=6,
        submitted_at=datetime(2025, 3, 1, 6, 0, tzinfo=timezone.utc),
    )
    assert score_kyc(stale, as_of) == 10


def test_compute_risk_score_deterministic(new_merchant, as_of):
    assert compute_risk_score(new_merchant, as_of) == compute_risk_score(new_merchant, as_of)


def test_total_score_bounded_over_variants(best_merchant, worst_merchant, new_merchant, as_of):
    """Test 0 <= total <= 100 across mixed and partial snapshots"""
    variants = [best_merchant, worst_merchant, new_merchant, MerchantSnapshot(merchant_id="x")]
    for base in (best_merchant, worst_merchant):
        variants.extend([
            replace(base, kyc=None),
            replace(base, financials=None),
            replace(base, created_at=None),
            replace(base, status=None),
            replace(base, flags=tuple(f"fraud {i}" for i in range(20))),
            replace(base, created_at=as_of + timedelta(days=10)),
            replace(base, kyc=KycRecord(documents_submitted=-3, documents_verified=50)),
        ])

    for merchant in variants:
        assessment = compute_risk_score(merchant, as_of)
        assert 0 <= assessment.total_score <= 100
        for value in vars(assessment.components).values():
            assert 0 <= value <= 100


def test_concerning_components_threshold_is_exclusive():
    scores = {"kyc": 50, "business_maturity": 51, "transaction": 80, "compliance": 0, "flags": 80}
    assert concerning_components(scores) == ["transaction", "flags", "business_maturity"]


def test_summarize_portfolio(best_merchant, worst_merchant, new_merchant, as_of):
    """Test the overview counts (high includes critical)"""
    flagged_new = replace(new_merchant, flags=("chargebacks",))
    merchants = [best_merchant, worst_merchant, flagged_new]
    assessments = [compute_risk_score(m, as_of) for m in merchants]

    metrics = summarize_portfolio(merchants, assessments)

    assert metrics.total_merchants == 3
    assert metrics.high_risk == 1
    assert metrics.medium_risk == 1
    assert metrics.low_risk == 1
    assert metrics.pending_kyc == 1
    assert metrics.flagged_merchants == 2
