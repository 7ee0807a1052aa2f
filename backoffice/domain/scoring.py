"""Merchant risk scoring engine - core business logic for risk reviews"""

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from backoffice.domain import rules
from backoffice.domain.models import (
    Financials,
    KycRecord,
    MerchantSnapshot,
    RiskAssessment,
    RiskComponents,
    RiskLevel,
    RiskMetrics,
)
from backoffice.utils.date_utils import days_between
from backoffice.utils.number_utils import clamp, round_half_up


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


def _merchant_age_days(merchant: MerchantSnapshot, as_of: date) -> Optional[int]:
    if merchant.created_at is None:
        return None
    return days_between(merchant.created_at, as_of)


def _average_ticket(financials: Financials) -> Decimal:
    if financials.total_transactions <= 0:
        return Decimal(0)
    return financials.total_revenue / financials.total_transactions


def _has_volume_spike(financials: Financials) -> bool:
    """Monthly volume implies more transactions than the lifetime history can explain"""
    if financials.total_transactions <= 0 or financials.monthly_volume <= 0:
        return False
    average = _average_ticket(financials) or Decimal(1)
    monthly_estimate = financials.monthly_volume / average
    return monthly_estimate > financials.total_transactions * rules.VOLUME_SPIKE_MULTIPLIER


def _critical_flags(flags: Iterable[str]) -> List[str]:
    return [
        flag for flag in flags
        if any(keyword in flag.lower() for keyword in rules.CRITICAL_FLAG_KEYWORDS)
    ]


def _has_unverified_documents(kyc: Optional[KycRecord]) -> bool:
    if kyc is None:
        return False
    return max(kyc.documents_submitted, 0) > max(kyc.documents_verified, 0)


def score_kyc(kyc: KycRecord, as_of: date) -> int:
    """
    KYC risk, 0-100.

    - Status: 0 (approved) to 50 (rejected)
    - Document completeness against the required set: 0-30
    - Verification rate of submitted documents: 0-20
    - Submission staleness: 0-10
    """
    score = rules.KYC_STATUS_POINTS.get(kyc.status or "", rules.KYC_UNKNOWN_STATUS_POINTS)

    submitted = min(max(kyc.documents_submitted, 0), rules.REQUIRED_KYC_DOCUMENTS)
    missing_ratio = Decimal(rules.REQUIRED_KYC_DOCUMENTS - submitted) / rules.REQUIRED_KYC_DOCUMENTS
    score += round_half_up(missing_ratio * rules.KYC_COMPLETENESS_POINTS)

    if submitted > 0:
        verified = min(max(kyc.documents_verified, 0), submitted)
        unverified_ratio = Decimal(submitted - verified) / submitted
        score += round_half_up(unverified_ratio * rules.KYC_VERIFICATION_POINTS)
    else:
        score += rules.KYC_VERIFICATION_POINTS

    if kyc.submitted_at is not None:
        days_since_submission = days_between(kyc.submitted_at, as_of)
        for older_than, points in rules.KYC_STALENESS_POINTS:
            if days_since_submission > older_than:
                score += points
                break

    return clamp(score)


def score_business_maturity(merchant: MerchantSnapshot, as_of: date) -> int:
    """
    Business maturity risk, 0-100. Requires merchant.created_at.

    - Account age: 25 for under a week, tapering to 0 at six months
    - Registration: 25 without a registration number, 15 without a tax ID
    - Business type: 25 for high-risk verticals, 15 for medium-risk ones
    - Contact details: 15 without email, 10 without phone
    """
    score = 0

    age_days = _merchant_age_days(merchant, as_of)
    if age_days is not None:
        for younger_than, points in rules.ACCOUNT_AGE_POINTS:
            if age_days < younger_than:
                score += points
                break

    if _is_blank(merchant.registration_number):
        score += rules.MISSING_REGISTRATION_POINTS
    elif _is_blank(merchant.tax_id):
        score += rules.MISSING_TAX_ID_POINTS

    business_type = (merchant.business_type or "").lower()
    if any(kind in business_type for kind in rules.HIGH_RISK_BUSINESS_TYPES):
        score += rules.HIGH_RISK_BUSINESS_TYPE_POINTS
    elif any(kind in business_type for kind in rules.MEDIUM_RISK_BUSINESS_TYPES):
        score += rules.MEDIUM_RISK_BUSINESS_TYPE_POINTS

    if _is_blank(merchant.email):
        score += rules.MISSING_EMAIL_POINTS
    if _is_blank(merchant.phone):
        score += rules.MISSING_PHONE_POINTS

    return clamp(score)


def score_transactions(financials: Financials) -> int:
    """
    Transaction pattern risk, 0-100.

    - Thin history: 20 with no transactions, 15 under 10, 10 under 50
    - Volume spike: 30 when monthly volume outruns the lifetime history
    - Large average ticket: up to 25
    """
    score = 0

    for fewer_than, points in rules.TRANSACTION_HISTORY_POINTS:
        if financials.total_transactions < fewer_than:
            score += points
            break

    if _has_volume_spike(financials):
        score += rules.VOLUME_SPIKE_POINTS

    average = _average_ticket(financials)
    for above, points in rules.AVERAGE_TICKET_POINTS:
        if average > above:
            score += points
            break

    return clamp(score)


def score_compliance(merchant: MerchantSnapshot) -> int:
    """
    Compliance risk, 0-100. Requires merchant.status.

    - Account status: 0 (active) to 100 (closed)
    - Address completeness: 10 per missing street/city/country
    - Payout method: 30 with none, 10 with mobile money only
    - Sanctions screening: 30 potential match, 100 confirmed, 10 unscreened
    """
    score = rules.MERCHANT_STATUS_POINTS.get(merchant.status or "", rules.UNKNOWN_MERCHANT_STATUS_POINTS)

    address = merchant.address
    for part in ("street", "city", "country"):
        if address is None or _is_blank(getattr(address, part)):
            score += rules.MISSING_ADDRESS_FIELD_POINTS

    bank = merchant.bank_details
    wallet = merchant.mobile_money
    has_bank = bank is not None and not _is_blank(bank.account_number) and not _is_blank(bank.bank_name)
    has_wallet = wallet is not None and not _is_blank(wallet.number) and not _is_blank(wallet.provider)
    if not has_bank and not has_wallet:
        score += rules.NO_PAYOUT_METHOD_POINTS
    elif not has_bank:
        score += rules.MOBILE_MONEY_ONLY_POINTS

    if merchant.sanctions_screening is None:
        score += rules.SANCTIONS_NOT_SCREENED_POINTS
    else:
        score += rules.SANCTIONS_SCREENING_POINTS.get(
            merchant.sanctions_screening, rules.SANCTIONS_NOT_SCREENED_POINTS
        )

    return clamp(score)


def score_flags(flags: Sequence[str]) -> int:
    """Admin risk flags, 0-100: 15 per flag (max 50) plus 25 per fraud/suspicious/AML flag (max 50)"""
    count_points = min(rules.FLAG_COUNT_CAP, len(flags) * rules.FLAG_COUNT_POINTS)
    critical_points = min(rules.CRITICAL_FLAG_CAP, len(_critical_flags(flags)) * rules.CRITICAL_FLAG_POINTS)
    return clamp(count_points + critical_points)


def determine_risk_level(score: int) -> RiskLevel:
    """
    Map a composite score to a risk level.

    Bands (lower bound inclusive):
    - 75+:   critical
    - 50-74: high
    - 25-49: medium
    - 0-24:  low
    """
    for lower_bound, level in rules.RISK_LEVEL_THRESHOLDS:
        if score >= lower_bound:
            return RiskLevel(level)
    return RiskLevel.LOW


def _describe_component(component: str, merchant: MerchantSnapshot, as_of: date) -> str:
    """One-line reason a component scored as concerning"""
    if component == "kyc":
        kyc = merchant.kyc
        if kyc.status == "rejected":
            return "KYC documents were rejected"
        if kyc.status == "expired":
            return "KYC documents have expired"
        if kyc.documents_submitted < rules.INSUFFICIENT_KYC_DOCUMENTS:
            return "Insufficient KYC documents submitted"
        return "KYC verification not completed"

    if component == "business_maturity":
        age_days = _merchant_age_days(merchant, as_of)
        if age_days is not None and age_days < rules.NEW_ACCOUNT_DAYS:
            return f"New merchant account (less than {rules.NEW_ACCOUNT_DAYS} days old)"
        if _is_blank(merchant.registration_number):
            return "Missing business registration number"
        business_type = (merchant.business_type or "").lower()
        if any(kind in business_type for kind in rules.HIGH_RISK_BUSINESS_TYPES):
            return f"High-risk business type ({merchant.business_type})"
        return "Incomplete business profile"

    if component == "transaction":
        financials = merchant.financials
        if financials.total_transactions <= 0:
            return "No transaction history"
        if _has_volume_spike(financials):
            return "Unusual spike in monthly transaction volume"
        if _average_ticket(financials) > rules.HIGH_AVERAGE_TICKET:
            return "High average transaction value"
        return "Limited transaction history"

    if component == "compliance":
        if merchant.sanctions_screening == "confirmed_match":
            return "Confirmed sanctions screening match"
        if merchant.status in rules.ADVERSE_MERCHANT_STATUSES:
            return f"Merchant account is {merchant.status}"
        if merchant.status == "pending":
            return "Merchant account pending approval"
        if merchant.sanctions_screening == "potential_match":
            return "Potential sanctions screening match"
        address = merchant.address
        if address is None or _is_blank(address.street) or _is_blank(address.city):
            return "Incomplete business address information"
        return "No verified payout method"

    flag_count = len(merchant.flags)
    critical = len(_critical_flags(merchant.flags))
    description = f"{flag_count} active risk flag{'s' if flag_count != 1 else ''}"
    if critical:
        description += f" ({critical} fraud/AML related)"
    return description


def concerning_components(scores: Dict[str, int]) -> List[str]:
    """Components above the concerning threshold, highest score first"""
    concerning = [c for c in rules.RISK_COMPONENTS if scores[c] > rules.CONCERNING_COMPONENT_SCORE]
    # list.sort is stable, so equal scores keep component order
    concerning.sort(key=lambda c: scores[c], reverse=True)
    return concerning


def identify_risk_factors(
    merchant: MerchantSnapshot,
    scores: Dict[str, int],
    missing: Iterable[str],
    as_of: date,
) -> List[str]:
    """
    One factor per component scoring above the concerning threshold,
    highest score first.
    """
    missing = set(missing)
    factors = []
    for component in concerning_components(scores):
        if component in missing:
            factors.append(rules.MISSING_INPUT_FACTORS[component])
        else:
            factors.append(_describe_component(component, merchant, as_of))
    return factors


def generate_recommendations(
    merchant: MerchantSnapshot,
    level: RiskLevel,
    concerning: Sequence[str],
) -> List[str]:
    """
    Level-driven actions first, then fixed actions per concerning component.

    Document verification is only suggested while some submitted KYC
    documents are still unverified.
    """
    recommendations: List[str] = []

    if level in (RiskLevel.HIGH, RiskLevel.CRITICAL):
        recommendations.append(rules.MANUAL_REVIEW_RECOMMENDATION)
        if merchant.has_transaction_limits:
            recommendations.append(rules.TIGHTEN_LIMITS_RECOMMENDATION)
        else:
            recommendations.append(rules.SET_LIMITS_RECOMMENDATION)
        if merchant.status == "active":
            recommendations.append(rules.SUSPEND_RECOMMENDATION)
    elif level == RiskLevel.MEDIUM:
        recommendations.append(rules.REVIEW_LIMITS_RECOMMENDATION)

    for component in concerning:
        actions = list(rules.COMPONENT_RECOMMENDATIONS[component])
        if component == "kyc" and _has_unverified_documents(merchant.kyc):
            actions.append(rules.VERIFY_KYC_RECOMMENDATION)
        for action in actions:
            if action not in recommendations:
                recommendations.append(action)

    return recommendations


def compute_risk_score(merchant: MerchantSnapshot, as_of: Optional[date] = None) -> RiskAssessment:
    """
    Main entry point: score a merchant across all five components.

    Never raises. A component whose required input is absent (no KYC record,
    no creation date, no financials, no account status) scores the maximum
    and is reported as a factor, so a brand-new merchant still renders.

    Weights: KYC 30%, business maturity 20%, transactions 25%,
    compliance 15%, flags 10%.
    """
    as_of = as_of or date.today()
    missing = []

    if merchant.kyc is None:
        missing.append("kyc")
        kyc = rules.MAX_RISK_SCORE
    else:
        kyc = score_kyc(merchant.kyc, as_of)

    if merchant.created_at is None:
        missing.append("business_maturity")
        maturity = rules.MAX_RISK_SCORE
    else:
        maturity = score_business_maturity(merchant, as_of)

    if merchant.financials is None:
        missing.append("transaction")
        transaction = rules.MAX_RISK_SCORE
    else:
        transaction = score_transactions(merchant.financials)

    if _is_blank(merchant.status):
        missing.append("compliance")
        compliance = rules.MAX_RISK_SCORE
    else:
        compliance = score_compliance(merchant)

    flags = score_flags(merchant.flags)

    scores = {
        "kyc": kyc,
        "business_maturity": maturity,
        "transaction": transaction,
        "compliance": compliance,
        "flags": flags,
    }
    weighted = sum(rules.RISK_WEIGHTS[component] * scores[component] for component in rules.RISK_COMPONENTS)
    total_score = clamp(round_half_up(weighted), rules.MIN_RISK_SCORE, rules.MAX_RISK_SCORE)
    level = determine_risk_level(total_score)

    factors = identify_risk_factors(merchant, scores, missing, as_of)
    recommendations = generate_recommendations(merchant, level, concerning_components(scores))

    return RiskAssessment(
        total_score=total_score,
        level=level,
        components=RiskComponents(
            kyc_score=kyc,
            business_maturity_score=maturity,
            transaction_score=transaction,
            compliance_score=compliance,
            flags_score=flags,
        ),
        factors=factors,
        recommendations=recommendations,
    )


def summarize_portfolio(
    merchants: Sequence[MerchantSnapshot],
    assessments: Sequence[RiskAssessment],
) -> RiskMetrics:
    """Counts for the risk overview cards; merchants and assessments are parallel sequences"""
    levels = [assessment.level for assessment in assessments]
    return RiskMetrics(
        total_merchants=len(merchants),
        high_risk=sum(1 for level in levels if level in (RiskLevel.HIGH, RiskLevel.CRITICAL)),
        medium_risk=sum(1 for level in levels if level == RiskLevel.MEDIUM),
        low_risk=sum(1 for level in levels if level == RiskLevel.LOW),
        pending_kyc=sum(
            1 for m in merchants
            if m.kyc is not None and m.kyc.status in rules.KYC_PENDING_STATUSES
        ),
        flagged_merchants=sum(1 for m in merchants if m.flags),
    )
