"""
Shared response envelopes for health, metrics and errors.
"""
from datetime import datetime
from typing import Dict

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standardized error payload for all API and validation errors."""

    error: str
    details: str
    status: int

    class Config:
        json_schema_extra = {
            "example": {
                "error": "request_failed",
                "details": "Invalid period '2d'. Supported values: 1h, 1d, 1w",
                "status": 400,
            }
        }


class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: datetime


class RequestLatency(BaseModel):
    request_count: int
    average: float
    max: float
    last: float
    status_classes: Dict[str, int] = {}


class MetricsResponse(BaseModel):
    service: str
    uptime_seconds: float
    api_latency_ms: RequestLatency
    cache: Dict[str, int]
    providers: Dict[str, Dict[str, float]]
    timestamp: datetime
