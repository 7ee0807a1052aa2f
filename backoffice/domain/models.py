"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple

from backoffice.domain.money import Money


class FeeCorridor(str, Enum):
    """Which fee schedule a transaction is charged under"""

    DOMESTIC = "domestic"
    INTERNATIONAL = "international"


@dataclass(frozen=True)
class FeeSchedule:
    """Percentage + fixed fee, clamped to [minimum, maximum]"""

    percentage: Decimal  # 0-100, e.g. Decimal("2.5") for 2.5%
    fixed: Money
    minimum: Money
    maximum: Money

    @property
    def currency(self) -> str:
        return self.fixed.currency


@dataclass(frozen=True)
class FeeConfiguration:
    """A tenant's domestic and international schedules"""

    domestic: FeeSchedule
    international: FeeSchedule

    def schedule_for(self, corridor: FeeCorridor) -> FeeSchedule:
        return getattr(self, FeeCorridor(corridor).value)

    def with_schedule(self, corridor: FeeCorridor, schedule: FeeSchedule) -> "FeeConfiguration":
        """Return a copy with one corridor's schedule replaced"""
        return replace(self, **{FeeCorridor(corridor).value: schedule})


@dataclass(frozen=True)
class FeeBreakdown:
    """Every intermediate value of a fee computation"""

    amount: Money
    percentage: Decimal
    percentage_fee: Money  # already rounded to the minor unit
    fixed_fee: Money
    subtotal: Money
    fee: Money
    clamped_to: Optional[str] = None  # "minimum" | "maximum"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class KycRecord:
    status: Optional[str] = None  # pending | submitted | under_review | approved | rejected | expired
    documents_submitted: int = 0
    documents_verified: int = 0
    submitted_at: Optional[date] = None


@dataclass(frozen=True)
class Financials:
    """Lifetime and monthly processing figures, in base currency major units"""

    total_transactions: int = 0
    total_revenue: Decimal = Decimal(0)
    monthly_volume: Decimal = Decimal(0)


@dataclass(frozen=True)
class Address:
    street: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


@dataclass(frozen=True)
class BankDetails:
    account_number: Optional[str] = None
    bank_name: Optional[str] = None


@dataclass(frozen=True)
class MobileMoneyWallet:
    number: Optional[str] = None
    provider: Optional[str] = None


@dataclass(frozen=True)
class MerchantSnapshot:
    """
    Read-only view of the merchant fields the risk calculator needs.

    kyc, created_at, financials and status are the inputs each component
    cannot be scored without; when one is None that component is scored as
    worst case. Everything else is optional detail.
    """

    merchant_id: str
    status: Optional[str] = None  # active | pending | suspended | rejected | closed
    kyc: Optional[KycRecord] = None
    created_at: Optional[date] = None
    financials: Optional[Financials] = None
    registration_number: Optional[str] = None
    tax_id: Optional[str] = None
    business_type: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[Address] = None
    bank_details: Optional[BankDetails] = None
    mobile_money: Optional[MobileMoneyWallet] = None
    sanctions_screening: Optional[str] = None  # clear | potential_match | confirmed_match
    flags: Tuple[str, ...] = field(default_factory=tuple)
    has_transaction_limits: bool = False


@dataclass(frozen=True)
class RiskComponents:
    """Per-component risk, 0-100, higher is riskier"""

    kyc_score: int
    business_maturity_score: int
    transaction_score: int
    compliance_score: int
    flags_score: int


@dataclass(frozen=True)
class RiskAssessment:
    """Output of merchant risk scoring"""

    total_score: int
    level: RiskLevel
    components: RiskComponents
    factors: List[str]
    recommendations: List[str]


@dataclass(frozen=True)
class RiskMetrics:
    """Portfolio counts shown above the merchant risk table"""

    total_merchants: int
    high_risk: int  # high + critical
    medium_risk: int
    low_risk: int
    pending_kyc: int
    flagged_merchants: int
