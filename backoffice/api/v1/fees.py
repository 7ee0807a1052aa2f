"""Fee endpoints - default schedules, schedule validation, and fee quotes"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request

from backoffice.api.dependencies import get_fee_configuration, get_request_id
from backoffice.api.v1.schemas import (
    FeeQuoteRequest,
    FeeQuoteResponse,
    FeeScheduleSchema,
    FeeSchedulesResponse,
    ScheduleValidationResponse,
)
from backoffice.domain.exceptions import InvalidArgumentError
from backoffice.domain.fees import compute_fee_breakdown, validate_fee_schedule
from backoffice.domain.models import FeeConfiguration
from backoffice.domain.money import Money
from backoffice.infrastructure.observability.logging import log_fee_quote
from backoffice.infrastructure.observability.metrics import invalid_request_counter, record_fee_quote

router = APIRouter()


@router.get("/fees/schedules", response_model=FeeSchedulesResponse)
def get_fee_schedules(config: FeeConfiguration = Depends(get_fee_configuration)):
    """Domestic and international schedules a new tenant starts with"""
    return FeeSchedulesResponse(
        domestic=FeeScheduleSchema.from_domain(config.domestic),
        international=FeeScheduleSchema.from_domain(config.international),
    )


@router.post("/fees/schedules/validate", response_model=ScheduleValidationResponse)
def validate_schedule(body: FeeScheduleSchema, request: Request):
    """
    Validate a schedule before the configuration screen saves it.

    Returns 422 with the first violated rule (negative rates, minimum above
    maximum, precision finer than the currency allows).
    """
    request_id = get_request_id(request)
    try:
        validate_fee_schedule(body.to_domain())
    except InvalidArgumentError as e:
        invalid_request_counter.labels(operation="validate_schedule").inc()
        logging.warning(f"Invalid fee schedule: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    return ScheduleValidationResponse(valid=True)


@router.post("/fees/quote", response_model=FeeQuoteResponse)
def quote_fee(
    body: FeeQuoteRequest,
    request: Request,
    config: FeeConfiguration = Depends(get_fee_configuration),
):
    """
    Compute the fee on a transaction amount.

    Flow:
    1. Pick the explicit schedule from the body, else the corridor's configured one
    2. Compute the breakdown (round percentage fee, add fixed, clamp)
    3. Record metrics and a structured log line
    """
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    try:
        schedule = body.schedule.to_domain() if body.schedule else config.schedule_for(body.corridor)
        amount = Money(body.amount, body.currency or schedule.currency)
        breakdown = compute_fee_breakdown(amount, schedule)
    except InvalidArgumentError as e:
        invalid_request_counter.labels(operation="fee_quote").inc()
        logging.warning(f"Invalid fee quote request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.perf_counter() - start_time) * 1000
    record_fee_quote(body.corridor.value, breakdown.clamped_to)
    log_fee_quote(
        request_id,
        body.corridor.value,
        breakdown.fee.currency,
        str(breakdown.fee.amount),
        breakdown.clamped_to,
        duration_ms,
    )

    return FeeQuoteResponse.from_domain(body.corridor, breakdown)
