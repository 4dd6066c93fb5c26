#!/usr/bin/env python3
"""
Base Pydantic models for the estimator shared across the API and the pricing core.
JSON payloads use the camelCase names of the estimator front end, Python code uses snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional


FEE_FIELDS = (
    "silkscreen_print_cost",
    "dtf_print_cost",
    "setup_cost",
    "additional_options_cost",
    "custom_items_cost",
    "sample_items_cost",
)


class CamelModel(BaseModel):
    """Accepts both camelCase aliases and snake_case field names"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GroupCost(CamelModel):
    """Cost breakdown for one processing group of an order"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    group_id: str = ""
    group_name: str = ""
    quantity: int = Field(..., ge=0, description="Total item count in the group")
    bring_in_quantity: int = Field(0, ge=0, description="Items supplied by the customer")
    tshirt_cost: float = Field(0, ge=0, description="Material cost after discounts")
    silkscreen_print_cost: float = Field(0, ge=0)
    dtf_print_cost: float = Field(0, ge=0)
    setup_cost: float = Field(0, ge=0)
    additional_options_cost: float = Field(0, ge=0)
    custom_items_cost: float = Field(0, ge=0)
    sample_items_cost: float = Field(0, ge=0)
    product_discount: float = Field(0, ge=0, description="Already applied to tshirt_cost")

    @field_validator(
        "bring_in_quantity",
        "tshirt_cost",
        *FEE_FIELDS,
        "product_discount",
        mode="before",
    )
    def missing_amount_is_zero(cls, v):
        return 0 if v is None else v

    @model_validator(mode="after")
    def validate_bring_in_quantity(self):
        if self.bring_in_quantity > self.quantity:
            raise ValueError("bringInQuantity cannot exceed quantity")
        return self

    @property
    def processing_fee_total(self) -> float:
        """Everything except the material cost"""
        return sum(getattr(self, name) for name in FEE_FIELDS)

    @property
    def sales_quantity(self) -> int:
        return self.quantity - self.bring_in_quantity

    @property
    def total_cost(self) -> float:
        return self.tshirt_cost + self.processing_fee_total


class GroupUnitPrices(CamelModel):
    """Display-ready unit prices for one processing group"""
    group_id: str
    group_name: str
    labor_unit_price: int
    sales_unit_price: int


class OrderItem(CamelModel):
    """A product line (product, color, size) inside a processing group"""
    product_id: str
    product_name: str = ""
    color: str = ""
    size: str = ""
    quantity: int = Field(..., ge=0)
    unit_price: float = Field(0, ge=0)
    adjusted_unit_price: Optional[float] = Field(None, ge=0)
    is_bring_in: bool = False


class CustomItem(CamelModel):
    """Free-form charge added to a group, e.g. folding or bagging"""
    id: str
    label: str
    amount: float = Field(..., ge=0)
    enabled: bool = True


class SampleItem(CamelModel):
    id: str
    label: str
    quantity: int = Field(..., ge=0)
    unit_price: float = Field(..., ge=0)


class ProcessingGroup(CamelModel):
    """Items sharing the same print treatment, with their already-priced processing fees"""
    id: str
    name: str
    items: List[OrderItem] = Field(default_factory=list)
    custom_items: List[CustomItem] = Field(default_factory=list)
    sample_items: List[SampleItem] = Field(default_factory=list)
    silkscreen_print_cost: float = Field(0, ge=0)
    dtf_print_cost: float = Field(0, ge=0)
    setup_cost: float = Field(0, ge=0)
    additional_options_cost: float = Field(0, ge=0)


class CustomerInfo(CamelModel):
    """Address data used for shipping-region lookup"""
    address1: str = ""
    shipping_address1: str = ""
    has_separate_shipping_address: bool = False

    @property
    def delivery_address(self) -> str:
        if self.has_separate_shipping_address and self.shipping_address1:
            return self.shipping_address1
        return self.address1


class GroupBreakdown(CamelModel):
    """A group's cost record together with its unit prices"""
    group_cost: GroupCost
    labor_unit_price: int
    sales_unit_price: int


class EstimateResult(CamelModel):
    """Order-level totals of an estimate"""
    total_quantity: int
    tshirt_cost: float
    print_cost: float
    setup_cost: float
    additional_options_cost: float
    custom_items_cost: float
    sample_items_cost: float
    product_discount: float
    subtotal: float
    shipping_cost: int
    tax: int
    total_cost_with_tax: float
    cost_per_shirt: int
    groups: List[GroupBreakdown] = Field(default_factory=list)
