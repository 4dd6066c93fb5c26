#!/usr/bin/env python3
"""
Unit price calculations for a processing group.

Labor unit price spreads the processing fees over every item in the group, bring-in items
included. Sales unit price spreads the material cost over sold items only and adds the
labor unit price on top.
"""

from decimal import Decimal, ROUND_HALF_UP

from models.base_models import GroupCost, GroupUnitPrices


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up. Works on the exact binary value of the float."""
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_labor_unit_price(group_cost: GroupCost) -> int:
    """Average processing fee per item, rounded. Returns 0 for an empty group."""
    total_group_quantity = group_cost.quantity
    if total_group_quantity == 0:
        return 0

    return round_half_up(group_cost.processing_fee_total / total_group_quantity)


def calculate_sales_unit_price(group_cost: GroupCost, labor_unit_price: int) -> int:
    """
    Average selling price per sold item.

    The material cost per sold item is rounded on its own before labor_unit_price is added.
    labor_unit_price is taken as given. Returns 0 when every item is a bring-in item.
    """
    sales_quantity = group_cost.quantity - (group_cost.bring_in_quantity or 0)
    if sales_quantity == 0:
        return 0

    # tshirt_cost already reflects any discounts applied
    sales_item_cost_per_item = round_half_up(group_cost.tshirt_cost / sales_quantity)

    return sales_item_cost_per_item + labor_unit_price


def calculate_unit_prices(group_cost: GroupCost) -> GroupUnitPrices:
    labor_unit_price = calculate_labor_unit_price(group_cost)
    return GroupUnitPrices(
        group_id=group_cost.group_id,
        group_name=group_cost.group_name,
        labor_unit_price=labor_unit_price,
        sales_unit_price=calculate_sales_unit_price(group_cost, labor_unit_price),
    )
