"""Merchant risk endpoints - single and batch assessments"""

import logging
import time

from fastapi import APIRouter, HTTPException, Request

from backoffice.api.dependencies import get_request_id
from backoffice.api.v1.schemas import (
    RiskAssessmentRequest,
    RiskAssessmentResponse,
    RiskBatchRequest,
    RiskBatchResponse,
    RiskMetricsSchema,
)
from backoffice.config import settings
from backoffice.domain.scoring import compute_risk_score, summarize_portfolio
from backoffice.infrastructure.observability.logging import log_risk_assessment, log_risk_batch
from backoffice.infrastructure.observability.metrics import invalid_request_counter, record_risk_assessment

router = APIRouter()


@router.post("/risk/assessment", response_model=RiskAssessmentResponse)
def assess_merchant(body: RiskAssessmentRequest, request: Request):
    """
    Score one merchant for the risk detail view.

    Always returns an assessment; missing merchant data raises the affected
    component to maximum risk and shows up in factors.
    """
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    try:
        snapshot = body.merchant.to_domain()
        assessment = compute_risk_score(snapshot, as_of=body.as_of)
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.perf_counter() - start_time) * 1000
    record_risk_assessment(assessment.level.value)
    log_risk_assessment(
        request_id,
        snapshot.merchant_id,
        assessment.total_score,
        assessment.level.value,
        assessment.factors,
        duration_ms,
    )

    return RiskAssessmentResponse.from_domain(snapshot.merchant_id, assessment)


@router.post("/risk/assessments", response_model=RiskBatchResponse)
def assess_merchants(body: RiskBatchRequest, request: Request):
    """Score a page of merchants and summarise the portfolio's risk distribution"""
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    if len(body.merchants) > settings.max_batch_size:
        invalid_request_counter.labels(operation="risk_batch").inc()
        raise HTTPException(
            status_code=422,
            detail=f"At most {settings.max_batch_size} merchants per request",
        )

    snapshots = []
    assessments = []
    durations_ms = []
    try:
        for merchant in body.merchants:
            assessed_at = time.perf_counter()
            snapshot = merchant.to_domain()
            snapshots.append(snapshot)
            assessments.append(compute_risk_score(snapshot, as_of=body.as_of))
            durations_ms.append((time.perf_counter() - assessed_at) * 1000)
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    for snapshot, assessment, merchant_duration_ms in zip(snapshots, assessments, durations_ms):
        record_risk_assessment(assessment.level.value)
        log_risk_assessment(
            request_id,
            snapshot.merchant_id,
            assessment.total_score,
            assessment.level.value,
            assessment.factors,
            merchant_duration_ms,
        )

    metrics = summarize_portfolio(snapshots, assessments)
    log_risk_batch(
        request_id,
        metrics.total_merchants,
        metrics.high_risk,
        (time.perf_counter() - start_time) * 1000,
    )

    return RiskBatchResponse(
        assessments=[
            RiskAssessmentResponse.from_domain(snapshot.merchant_id, assessment)
            for snapshot, assessment in zip(snapshots, assessments)
        ],
        metrics=RiskMetricsSchema.from_domain(metrics),
    )
