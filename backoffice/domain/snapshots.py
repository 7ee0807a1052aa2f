"""
Conversion of stored merchant documents into MerchantSnapshot.

Merchant documents are loosely shaped: every field is optional, nesting
varies between older and newer records, and numbers may arrive as floats or
strings. This module is the only place that reads those raw mappings; a value
of the wrong type is treated as absent instead of raising, so the risk view
always renders.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Tuple

from backoffice.domain.models import (
    Address,
    BankDetails,
    Financials,
    KycRecord,
    MerchantSnapshot,
    MobileMoneyWallet,
)
from backoffice.utils.date_utils import to_date


def _mapping(value: Any) -> Optional[Mapping[str, Any]]:
    return value if isinstance(value, Mapping) else None


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    return None


def _count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float) and math.isfinite(value):
        return max(int(value), 0)
    return 0


def _amount(value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        return Decimal(0)
    try:
        result = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return Decimal(0)
    return result if result.is_finite() and result > 0 else Decimal(0)


def _first(document: Mapping[str, Any], *paths: str) -> Any:
    """First non-None value among dotted paths, e.g. "businessInfo.taxId" """
    for path in paths:
        node: Any = document
        for key in path.split("."):
            node = node.get(key) if isinstance(node, Mapping) else None
            if node is None:
                break
        if node is not None:
            return node
    return None


def _kyc(document: Mapping[str, Any]) -> Optional[KycRecord]:
    raw = _mapping(document.get("kyc"))
    if raw is None:
        return None
    return KycRecord(
        status=_text(raw.get("status")),
        documents_submitted=_count(raw.get("documentsSubmitted")),
        documents_verified=_count(raw.get("documentsVerified")),
        submitted_at=to_date(raw.get("submittedAt")),
    )


def _financials(document: Mapping[str, Any]) -> Optional[Financials]:
    raw = _mapping(document.get("financials"))
    if raw is None:
        return None
    return Financials(
        total_transactions=_count(raw.get("totalTransactions")),
        total_revenue=_amount(raw.get("totalRevenue")),
        monthly_volume=_amount(raw.get("monthlyVolume")),
    )


def _address(document: Mapping[str, Any]) -> Optional[Address]:
    raw = _mapping(document.get("address"))
    if raw is None:
        return None
    return Address(
        street=_text(raw.get("street")),
        city=_text(raw.get("city")),
        country=_text(raw.get("country")),
    )


def _bank_details(document: Mapping[str, Any]) -> Optional[BankDetails]:
    raw = _mapping(document.get("bankDetails"))
    if raw is None:
        return None
    return BankDetails(
        account_number=_text(raw.get("accountNumber")),
        bank_name=_text(raw.get("bankName")),
    )


def _mobile_money(document: Mapping[str, Any]) -> Optional[MobileMoneyWallet]:
    raw = _mapping(document.get("mobileMoneyWallet"))
    if raw is None:
        return None
    return MobileMoneyWallet(
        number=_text(raw.get("number")),
        provider=_text(raw.get("provider")),
    )


def _flags(document: Mapping[str, Any]) -> Tuple[str, ...]:
    raw = _first(document, "adminMetadata.flags")
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(flag for flag in raw if isinstance(flag, str) and flag.strip())


def merchant_snapshot_from_document(
    document: Mapping[str, Any],
    merchant_id: Optional[str] = None,
) -> MerchantSnapshot:
    """Build a MerchantSnapshot from a raw merchant document"""
    return MerchantSnapshot(
        merchant_id=merchant_id or _text(document.get("merchantId")) or "",
        status=_text(document.get("status")),
        kyc=_kyc(document),
        created_at=to_date(document.get("createdAt")),
        financials=_financials(document),
        registration_number=_text(_first(document, "registrationNumber", "businessInfo.registrationNumber")),
        tax_id=_text(_first(document, "taxId", "businessInfo.taxId")),
        business_type=_text(_first(document, "businessType", "businessInfo.businessType")),
        email=_text(_first(document, "contactInfo.email", "businessInfo.email")),
        phone=_text(_first(document, "contactInfo.phone", "businessInfo.phoneNumber")),
        address=_address(document),
        bank_details=_bank_details(document),
        mobile_money=_mobile_money(document),
        sanctions_screening=_text(_first(document, "compliance.sanctionsScreening")),
        flags=_flags(document),
        has_transaction_limits=bool(_first(document, "adminMetadata.transactionLimits")),
    )
