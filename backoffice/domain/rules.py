"""
Business rules for fee and risk calculation.

Every constant the fee and risk calculators depend on lives here, frozen, so
screens and services share one source of truth. This module holds plain data
only and imports nothing from the rest of the domain layer.
"""

from decimal import Decimal
from types import MappingProxyType

# ISO-4217 minor-unit precision for the currencies the platform settles in
CURRENCY_MINOR_UNITS = MappingProxyType({
    "GHS": 2,
    "NGN": 2,
    "KES": 2,
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "ZAR": 2,
    "JPY": 0,
    "XOF": 0,
    "XAF": 0,
})

# Fee schedules seeded for a new tenant, in the base currency (GHS)
DEFAULT_FEE_SCHEDULES = MappingProxyType({
    "domestic": MappingProxyType({
        "percentage": Decimal("2.5"),
        "fixed": Decimal("0.30"),
        "minimum": Decimal("0.10"),
        "maximum": Decimal("50.00"),
    }),
    "international": MappingProxyType({
        "percentage": Decimal("3.5"),
        "fixed": Decimal("0.50"),
        "minimum": Decimal("0.20"),
        "maximum": Decimal("100.00"),
    }),
})

MAX_FEE_PERCENTAGE = Decimal("100")

# Risk components in weight order; also the tie-break when ordering factors
RISK_COMPONENTS = ("kyc", "business_maturity", "transaction", "compliance", "flags")

# Composite risk weights, keyed by component; must sum to exactly 1.00
RISK_WEIGHTS = MappingProxyType({
    "kyc": Decimal("0.30"),
    "business_maturity": Decimal("0.20"),
    "transaction": Decimal("0.25"),
    "compliance": Decimal("0.15"),
    "flags": Decimal("0.10"),
})

# Factor reported when a component's required input is absent (flags never are)
MISSING_INPUT_FACTORS = MappingProxyType({
    "kyc": "No KYC data available",
    "business_maturity": "No account creation date available",
    "transaction": "No transaction data available",
    "compliance": "No merchant status available",
})

# (inclusive lower bound, level), checked top-down
RISK_LEVEL_THRESHOLDS = (
    (75, "critical"),
    (50, "high"),
    (25, "medium"),
)

MIN_RISK_SCORE = 0
MAX_RISK_SCORE = 100

# A component scoring above this is reported as a risk factor
CONCERNING_COMPONENT_SCORE = 50

# KYC
REQUIRED_KYC_DOCUMENTS = 6  # registration, tax cert, owner ID, address proof, bank statement, licence
KYC_STATUS_POINTS = MappingProxyType({
    "approved": 0,
    "submitted": 15,
    "under_review": 15,
    "pending": 30,
    "expired": 45,
    "rejected": 50,
})
KYC_UNKNOWN_STATUS_POINTS = 40
KYC_COMPLETENESS_POINTS = 30
KYC_VERIFICATION_POINTS = 20
# (submission older than N days, points), checked top-down
KYC_STALENESS_POINTS = ((90, 10), (30, 5))
KYC_PENDING_STATUSES = frozenset({"pending", "submitted", "under_review"})
# Fewer documents than this is reported as insufficient rather than unverified
INSUFFICIENT_KYC_DOCUMENTS = 4

# Business maturity
# (account younger than N days, points), checked top-down
ACCOUNT_AGE_POINTS = ((7, 25), (30, 20), (90, 10), (180, 5))
MISSING_REGISTRATION_POINTS = 25
MISSING_TAX_ID_POINTS = 15
HIGH_RISK_BUSINESS_TYPES = ("crypto", "gambling", "adult", "forex", "cannabis")
HIGH_RISK_BUSINESS_TYPE_POINTS = 25
MEDIUM_RISK_BUSINESS_TYPES = ("marketplace", "crowdfunding", "subscription")
MEDIUM_RISK_BUSINESS_TYPE_POINTS = 15
MISSING_EMAIL_POINTS = 15
MISSING_PHONE_POINTS = 10
NEW_ACCOUNT_DAYS = 30

# Transaction pattern (amounts in base currency major units)
# (fewer than N lifetime transactions, points), checked top-down
TRANSACTION_HISTORY_POINTS = ((1, 20), (10, 15), (50, 10))
VOLUME_SPIKE_MULTIPLIER = 2
VOLUME_SPIKE_POINTS = 30
# (average transaction above N, points), checked top-down
AVERAGE_TICKET_POINTS = (
    (Decimal("50000"), 25),
    (Decimal("20000"), 15),
    (Decimal("10000"), 10),
)
HIGH_AVERAGE_TICKET = Decimal("20000")

# Compliance
MERCHANT_STATUS_POINTS = MappingProxyType({
    "active": 0,
    "pending": 20,
    "suspended": 60,
    "rejected": 80,
    "closed": 100,
})
UNKNOWN_MERCHANT_STATUS_POINTS = 40
MISSING_ADDRESS_FIELD_POINTS = 10
NO_PAYOUT_METHOD_POINTS = 30
MOBILE_MONEY_ONLY_POINTS = 10
SANCTIONS_SCREENING_POINTS = MappingProxyType({
    "clear": 0,
    "potential_match": 30,
    "confirmed_match": 100,
})
SANCTIONS_NOT_SCREENED_POINTS = 10
# Statuses reported as "Merchant account is <status>"
ADVERSE_MERCHANT_STATUSES = frozenset({"suspended", "rejected", "closed"})

# Flags
FLAG_COUNT_POINTS = 15
FLAG_COUNT_CAP = 50
CRITICAL_FLAG_POINTS = 25
CRITICAL_FLAG_CAP = 50
CRITICAL_FLAG_KEYWORDS = ("fraud", "suspicious", "aml")

# Level-driven recommendations, emitted before the per-component ones
MANUAL_REVIEW_RECOMMENDATION = "Immediate manual review required"
TIGHTEN_LIMITS_RECOMMENDATION = "Consider tightening existing transaction limits"
SET_LIMITS_RECOMMENDATION = "Set conservative transaction limits"
SUSPEND_RECOMMENDATION = "Consider suspending account until review is complete"
REVIEW_LIMITS_RECOMMENDATION = "Review and adjust transaction limits as needed"

# Recommendations keyed by concerning component
COMPONENT_RECOMMENDATIONS = MappingProxyType({
    "kyc": ("Request complete KYC documentation",),
    "business_maturity": ("Confirm business registration and tax details",),
    "transaction": ("Monitor transactions closely",),
    "compliance": ("Resolve outstanding account compliance issues",),
    "flags": ("Investigate and resolve active risk flags",),
})
# Added for a concerning KYC component while submitted documents await verification
VERIFY_KYC_RECOMMENDATION = "Verify submitted KYC documents"
