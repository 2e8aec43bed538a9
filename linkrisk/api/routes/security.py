"""
LinkRisk Security API Routes

Assess URLs, IP addresses and email addresses, and report provider status.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from linkrisk.api.dependencies import get_engine
from linkrisk.models import AggregateReport
from linkrisk.utils.exceptions import InvalidTargetError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/security", tags=["security"])


class UrlRequest(BaseModel):
    """URL assessment request."""
    url: str = Field(..., description="Absolute http(s) URL")


class IpRequest(BaseModel):
    """IP assessment request."""
    ip: str = Field(..., description="IPv4 or IPv6 address")


class EmailRequest(BaseModel):
    """Email assessment request."""
    email: str = Field(..., description="Email address")


@router.post("/url", response_model=AggregateReport)
async def assess_url(request: UrlRequest, engine=Depends(get_engine)):
    """
    Assess a URL against every configured threat intelligence provider.

    Returns:
        Aggregate report with score, level, risk factors and recommendations
    """
    try:
        return await engine.assess_url(request.url)
    except InvalidTargetError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.post("/ip", response_model=AggregateReport)
async def assess_ip(request: IpRequest, engine=Depends(get_engine)):
    """Assess an IP address with the IP reputation providers."""
    try:
        return await engine.assess_ip(request.ip)
    except InvalidTargetError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.post("/email", response_model=AggregateReport)
async def assess_email(request: EmailRequest, engine=Depends(get_engine)):
    """Assess an email address for fraud indicators and breach exposure."""
    try:
        return await engine.assess_email(request.email)
    except InvalidTargetError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.get("/providers")
async def provider_status(engine=Depends(get_engine)) -> Dict[str, Dict[str, Any]]:
    """Configuration status and capabilities of every provider."""
    return engine.get_provider_status()
