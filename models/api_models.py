#!/usr/bin/env python3
"""
Pydantic models for API requests and responses.
These models provide type safety for all API endpoints.
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from .base_models import CamelModel, CustomerInfo, EstimateResult, GroupCost, GroupUnitPrices, ProcessingGroup


class UnitPricesRequest(CamelModel):
    """Request model for /api/unit-prices endpoint"""
    group_costs: List[GroupCost] = Field(..., min_length=1)


class UnitPricesResponse(BaseModel):
    """Response model for /api/unit-prices endpoint"""
    success: bool
    unit_prices: List[GroupUnitPrices]


class EstimateRequest(CamelModel):
    """Request model for /api/estimate endpoint"""
    processing_groups: List[ProcessingGroup] = Field(default_factory=list)
    customer_info: CustomerInfo = Field(default_factory=CustomerInfo)


class EstimateResponse(BaseModel):
    """Response model for /api/estimate endpoint"""
    success: bool
    session_id: str
    estimate: EstimateResult


class ExportEstimateRequest(BaseModel):
    """Request model for /api/export-estimate endpoint"""
    session_id: str


class ExportEstimateResponse(BaseModel):
    """Response model for /api/export-estimate endpoint"""
    success: bool
    filename: str
    download_url: str
    groups_exported: int


class CleanupSessionRequest(BaseModel):
    """Request model for /api/cleanup-session endpoint"""
    session_id: str


class CleanupSessionResponse(BaseModel):
    """Response model for /api/cleanup-session endpoint"""
    success: bool
    session_cleaned: bool
    files_deleted: int
    deleted_files: List[str]
    errors: List[str]


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[list] = None
