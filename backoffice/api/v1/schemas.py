"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from backoffice.domain.models import (
    Address,
    BankDetails,
    FeeBreakdown,
    FeeCorridor,
    FeeSchedule,
    Financials,
    KycRecord,
    MerchantSnapshot,
    MobileMoneyWallet,
    RiskAssessment,
    RiskMetrics,
)
from backoffice.domain.money import Money


class FeeScheduleSchema(BaseModel):
    """One corridor's fee parameters; amounts in the schedule currency"""

    percentage: Decimal = Field(..., description="Percentage fee, e.g. 2.5 for 2.5%")
    fixed: Decimal
    minimum: Decimal
    maximum: Decimal
    currency: str = Field(..., min_length=3, max_length=3)

    @classmethod
    def from_domain(cls, schedule: FeeSchedule) -> "FeeScheduleSchema":
        return cls(
            percentage=schedule.percentage,
            fixed=schedule.fixed.amount,
            minimum=schedule.minimum.amount,
            maximum=schedule.maximum.amount,
            currency=schedule.currency,
        )

    def to_domain(self) -> FeeSchedule:
        return FeeSchedule(
            percentage=self.percentage,
            fixed=Money(self.fixed, self.currency),
            minimum=Money(self.minimum, self.currency),
            maximum=Money(self.maximum, self.currency),
        )


class FeeSchedulesResponse(BaseModel):
    """Response for GET /v1/fees/schedules"""

    domestic: FeeScheduleSchema
    international: FeeScheduleSchema


class ScheduleValidationResponse(BaseModel):
    """Response for POST /v1/fees/schedules/validate"""

    valid: bool


class FeeQuoteRequest(BaseModel):
    """Request body for POST /v1/fees/quote"""

    amount: Decimal = Field(..., description="Transaction amount in major units")
    currency: Optional[str] = Field(None, description="Defaults to the schedule currency")
    corridor: FeeCorridor = FeeCorridor.DOMESTIC
    schedule: Optional[FeeScheduleSchema] = Field(
        None, description="Explicit schedule, e.g. an unsaved edit; defaults to the corridor's schedule"
    )


class FeeQuoteResponse(BaseModel):
    """Response for POST /v1/fees/quote"""

    corridor: FeeCorridor
    currency: str
    amount: Decimal
    percentage: Decimal
    percentage_fee: Decimal
    fixed_fee: Decimal
    subtotal: Decimal
    fee: Decimal
    clamped_to: Optional[str] = None

    @classmethod
    def from_domain(cls, corridor: FeeCorridor, breakdown: FeeBreakdown) -> "FeeQuoteResponse":
        return cls(
            corridor=corridor,
            currency=breakdown.amount.currency,
            amount=breakdown.amount.amount,
            percentage=breakdown.percentage,
            percentage_fee=breakdown.percentage_fee.amount,
            fixed_fee=breakdown.fixed_fee.amount,
            subtotal=breakdown.subtotal.amount,
            fee=breakdown.fee.amount,
            clamped_to=breakdown.clamped_to,
        )


class KycSchema(BaseModel):
    status: Optional[str] = None
    documents_submitted: int = Field(0, ge=0)
    documents_verified: int = Field(0, ge=0)
    submitted_at: Optional[date] = None


class FinancialsSchema(BaseModel):
    total_transactions: int = Field(0, ge=0)
    total_revenue: Decimal = Field(Decimal(0), ge=0)
    monthly_volume: Decimal = Field(Decimal(0), ge=0)


class AddressSchema(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


class BankDetailsSchema(BaseModel):
    account_number: Optional[str] = None
    bank_name: Optional[str] = None


class MobileMoneySchema(BaseModel):
    number: Optional[str] = None
    provider: Optional[str] = None


class MerchantSnapshotSchema(BaseModel):
    """Merchant fields used for risk scoring; omitted sections score as worst case"""

    merchant_id: str = Field(..., min_length=1, description="Merchant identifier")
    status: Optional[str] = None
    kyc: Optional[KycSchema] = None
    created_at: Optional[date] = None
    financials: Optional[FinancialsSchema] = None
    registration_number: Optional[str] = None
    tax_id: Optional[str] = None
    business_type: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[AddressSchema] = None
    bank_details: Optional[BankDetailsSchema] = None
    mobile_money: Optional[MobileMoneySchema] = None
    sanctions_screening: Optional[str] = None
    flags: List[str] = Field(default_factory=list)
    has_transaction_limits: bool = False

    def to_domain(self) -> MerchantSnapshot:
        return MerchantSnapshot(
            merchant_id=self.merchant_id,
            status=self.status,
            kyc=KycRecord(**self.kyc.model_dump()) if self.kyc else None,
            created_at=self.created_at,
            financials=Financials(**self.financials.model_dump()) if self.financials else None,
            registration_number=self.registration_number,
            tax_id=self.tax_id,
            business_type=self.business_type,
            email=self.email,
            phone=self.phone,
            address=Address(**self.address.model_dump()) if self.address else None,
            bank_details=BankDetails(**self.bank_details.model_dump()) if self.bank_details else None,
            mobile_money=MobileMoneyWallet(**self.mobile_money.model_dump()) if self.mobile_money else None,
            sanctions_screening=self.sanctions_screening,
            flags=tuple(self.flags),
            has_transaction_limits=self.has_transaction_limits,
        )


class RiskAssessmentRequest(BaseModel):
    """Request body for POST /v1/risk/assessment"""

    merchant: MerchantSnapshotSchema
    as_of: Optional[date] = Field(None, description="Date to score against; defaults to today")


class RiskBatchRequest(BaseModel):
    """Request body for POST /v1/risk/assessments"""

    merchants: List[MerchantSnapshotSchema]
    as_of: Optional[date] = None


class RiskComponentsSchema(BaseModel):
    kyc_score: int
    business_maturity_score: int
    transaction_score: int
    compliance_score: int
    flags_score: int


class RiskAssessmentResponse(BaseModel):
    """Score breakdown rendered in the merchant risk detail view"""

    merchant_id: str
    total_score: int
    level: str
    components: RiskComponentsSchema
    factors: List[str]
    recommendations: List[str]

    @classmethod
    def from_domain(cls, merchant_id: str, assessment: RiskAssessment) -> "RiskAssessmentResponse":
        components = assessment.components
        return cls(
            merchant_id=merchant_id,
            total_score=assessment.total_score,
            level=assessment.level.value,
            components=RiskComponentsSchema(
                kyc_score=components.kyc_score,
                business_maturity_score=components.business_maturity_score,
                transaction_score=components.transaction_score,
                compliance_score=components.compliance_score,
                flags_score=components.flags_score,
            ),
            factors=list(assessment.factors),
            recommendations=list(assessment.recommendations),
        )


class RiskMetricsSchema(BaseModel):
    total_merchants: int
    high_risk: int
    medium_risk: int
    low_risk: int
    pending_kyc: int
    flagged_merchants: int

    @classmethod
    def from_domain(cls, metrics: RiskMetrics) -> "RiskMetricsSchema":
        return cls(
            total_merchants=metrics.total_merchants,
            high_risk=metrics.high_risk,
            medium_risk=metrics.medium_risk,
            low_risk=metrics.low_risk,
            pending_kyc=metrics.pending_kyc,
            flagged_merchants=metrics.flagged_merchants,
        )


class RiskBatchResponse(BaseModel):
    """Response for POST /v1/risk/assessments"""

    assessments: List[RiskAssessmentResponse]
    metrics: RiskMetricsSchema
