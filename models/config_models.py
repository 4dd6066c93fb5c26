#!/usr/bin/env python3
"""
Pydantic models for the estimator pricing configuration.
These models define tax, shipping and display settings used when rolling up an estimate.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional


DEFAULT_REGION = "DEFAULT"


class ShippingRegion(BaseModel):
    """Flat shipping cost for a group of prefectures"""
    cost: float = Field(..., ge=0, description="Shipping cost for this region")
    prefectures: List[str] = Field(default_factory=list, description="Address prefixes served by this region")


def _validate_shipping_costs(v: Optional[Dict[str, ShippingRegion]]):
    if v is not None and DEFAULT_REGION not in v:
        raise ValueError(f"shipping_costs must contain a '{DEFAULT_REGION}' region")
    return v


class PricingConfig(BaseModel):
    """Configuration for estimate totals"""
    tax_rate: float = Field(0.10, ge=0, le=1, description="Consumption tax rate, shipping included")
    shipping_free_threshold: float = Field(30000, ge=0, description="Subtotal from which shipping is free")
    shipping_costs: Dict[str, ShippingRegion] = Field(..., description="Shipping cost per region")
    currency_symbol: str = Field("¥", min_length=1)

    @field_validator('shipping_costs')
    def validate_shipping_costs(cls, v):
        return _validate_shipping_costs(v)

    @classmethod
    def get_default_config(cls) -> 'PricingConfig':
        """Get default pricing configuration"""
        return cls(
            tax_rate=0.10,
            shipping_free_threshold=30000,
            shipping_costs={
                "HOKKAIDO": ShippingRegion(cost=1500, prefectures=["北海道"]),
                "OKINAWA": ShippingRegion(cost=2000, prefectures=["沖縄県"]),
                DEFAULT_REGION: ShippingRegion(cost=1000, prefectures=[]),
            },
            currency_symbol="¥",
        )


class ConfigUpdateRequest(BaseModel):
    """Request model for updating the pricing configuration"""
    tax_rate: Optional[float] = Field(None, ge=0, le=1)
    shipping_free_threshold: Optional[float] = Field(None, ge=0)
    shipping_costs: Optional[Dict[str, ShippingRegion]] = None
    currency_symbol: Optional[str] = Field(None, min_length=1)

    @field_validator('shipping_costs')
    def validate_shipping_costs(cls, v):
        return _validate_shipping_costs(v)


class ConfigInquiryResponse(BaseModel):
    """Response model for configuration inquiry"""
    success: bool
    config: Optional[PricingConfig] = None
    error: Optional[str] = None


class ConfigUpdateResponse(BaseModel):
    """Response model for configuration update"""
    success: bool
    message: str
    updated_fields: List[str] = Field(default_factory=list)
    error: Optional[str] = None
