#!/usr/bin/env python3
"""
Models package for the print estimator.
"""

from .base_models import (
    GroupCost,
    GroupUnitPrices,
    OrderItem,
    CustomItem,
    SampleItem,
    ProcessingGroup,
    CustomerInfo,
    GroupBreakdown,
    EstimateResult
)
from .config_models import (
    ShippingRegion,
    PricingConfig,
    ConfigUpdateRequest,
    ConfigInquiryResponse,
    ConfigUpdateResponse
)

__all__ = [
    "GroupCost",
    "GroupUnitPrices",
    "OrderItem",
    "CustomItem",
    "SampleItem",
    "ProcessingGroup",
    "CustomerInfo",
    "GroupBreakdown",
    "EstimateResult",
    "ShippingRegion",
    "PricingConfig",
    "ConfigUpdateRequest",
    "ConfigInquiryResponse",
    "ConfigUpdateResponse"
]
