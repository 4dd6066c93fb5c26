"""
Estimator Pricing Package
"""

from .unit_price_calculator import (
    round_half_up,
    calculate_labor_unit_price,
    calculate_sales_unit_price,
    calculate_unit_prices
)
from .estimate_processor import EstimateProcessor, build_group_cost, calculate_shipping_cost
from .estimate_exporter import EstimateExporter

__all__ = [
    'round_half_up',
    'calculate_labor_unit_price',
    'calculate_sales_unit_price',
    'calculate_unit_prices',
    'EstimateProcessor',
    'build_group_cost',
    'calculate_shipping_cost',
    'EstimateExporter'
]
