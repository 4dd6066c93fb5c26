#!/usr/bin/env python3
"""
Estimate processor that turns processing groups into group cost records and order totals.
Print, setup and option fees arrive already priced on each group; this module only
aggregates them, prices the material, and applies shipping and tax.
"""

import logging
import math
from typing import List, Optional

from models.base_models import (
    CustomerInfo,
    EstimateResult,
    GroupBreakdown,
    GroupCost,
    ProcessingGroup
)
from models.config_models import DEFAULT_REGION, PricingConfig
from .unit_price_calculator import calculate_labor_unit_price, calculate_sales_unit_price, round_half_up


def build_group_cost(group: ProcessingGroup) -> GroupCost:
    """Aggregate a processing group into its GroupCost record"""
    tshirt_cost = 0.0
    product_discount = 0.0
    quantity = 0
    bring_in_quantity = 0

    for item in group.items:
        quantity += item.quantity
        if item.is_bring_in:
            # Customer-supplied, no material charge
            bring_in_quantity += item.quantity
            continue

        final_unit_price = item.adjusted_unit_price if item.adjusted_unit_price is not None else item.unit_price
        tshirt_cost += final_unit_price * item.quantity

        if item.adjusted_unit_price is not None and item.adjusted_unit_price < item.unit_price:
            product_discount += (item.unit_price - item.adjusted_unit_price) * item.quantity

    custom_items_cost = sum(c.amount for c in group.custom_items if c.enabled)
    sample_items_cost = sum(s.unit_price * s.quantity for s in group.sample_items)

    return GroupCost(
        group_id=group.id,
        group_name=group.name,
        quantity=quantity,
        bring_in_quantity=bring_in_quantity,
        tshirt_cost=tshirt_cost,
        silkscreen_print_cost=group.silkscreen_print_cost,
        dtf_print_cost=group.dtf_print_cost,
        setup_cost=group.setup_cost,
        additional_options_cost=group.additional_options_cost,
        custom_items_cost=custom_items_cost,
        sample_items_cost=sample_items_cost,
        product_discount=product_discount,
    )


def get_region_for_address(address: str, config: PricingConfig) -> str:
    """Find the shipping region whose prefecture list matches the start of the address"""
    if not address:
        return DEFAULT_REGION

    for region, shipping in config.shipping_costs.items():
        if any(address.startswith(p) for p in shipping.prefectures):
            return region
    return DEFAULT_REGION


def calculate_shipping_cost(subtotal: float, customer: CustomerInfo, config: PricingConfig) -> int:
    """Flat regional shipping, free from the configured threshold"""
    if subtotal <= 0 or subtotal >= config.shipping_free_threshold:
        return 0

    region = get_region_for_address(customer.delivery_address, config)
    shipping = config.shipping_costs.get(region) or config.shipping_costs.get(DEFAULT_REGION)
    if shipping is None:
        return 0
    return round_half_up(shipping.cost)


class EstimateProcessor:
    """Calculates full estimates using the current pricing configuration"""

    def __init__(self, config: PricingConfig):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    def build_breakdown(self, group: ProcessingGroup) -> GroupBreakdown:
        group_cost = build_group_cost(group)
        labor_unit_price = calculate_labor_unit_price(group_cost)
        sales_unit_price = calculate_sales_unit_price(group_cost, labor_unit_price)

        self.logger.debug(
            f"Group {group.id}: quantity={group_cost.quantity}, bring_in={group_cost.bring_in_quantity}, "
            f"labor_unit_price={labor_unit_price}, sales_unit_price={sales_unit_price}"
        )
        return GroupBreakdown(
            group_cost=group_cost,
            labor_unit_price=labor_unit_price,
            sales_unit_price=sales_unit_price,
        )

    def calculate_estimate(self, groups: List[ProcessingGroup], customer: Optional[CustomerInfo] = None) -> EstimateResult:
        """Roll processing groups up into order totals with shipping and tax"""
        customer = customer or CustomerInfo()
        breakdowns = [self.build_breakdown(group) for group in groups]
        costs = [b.group_cost for b in breakdowns]

        subtotal = sum(c.total_cost for c in costs)
        total_quantity = sum(c.quantity for c in costs)

        shipping_cost = calculate_shipping_cost(subtotal, customer, self.config)
        # Shipping is taxed too
        tax = math.floor((subtotal + shipping_cost) * self.config.tax_rate)
        total_cost_with_tax = subtotal + shipping_cost + tax
        cost_per_shirt = round_half_up(total_cost_with_tax / total_quantity) if total_quantity > 0 else 0

        self.logger.info(
            f"Estimated {len(groups)} groups: subtotal={subtotal}, shipping={shipping_cost}, "
            f"tax={tax}, total={total_cost_with_tax}"
        )

        return EstimateResult(
            total_quantity=total_quantity,
            tshirt_cost=sum(c.tshirt_cost for c in costs),
            print_cost=sum(c.silkscreen_print_cost + c.dtf_print_cost for c in costs),
            setup_cost=sum(c.setup_cost for c in costs),
            additional_options_cost=sum(c.additional_options_cost for c in costs),
            custom_items_cost=sum(c.custom_items_cost for c in costs),
            sample_items_cost=sum(c.sample_items_cost for c in costs),
            product_discount=sum(c.product_discount for c in costs),
            subtotal=subtotal,
            shipping_cost=shipping_cost,
            tax=tax,
            total_cost_with_tax=total_cost_with_tax,
            cost_per_shirt=cost_per_shirt,
            groups=breakdowns,
        )
