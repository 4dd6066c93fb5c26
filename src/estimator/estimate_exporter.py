#!/usr/bin/env python3
"""
Exports an estimate breakdown to an Excel workbook.
"""

import logging
import os
import uuid
from datetime import datetime

import pandas as pd

from models.base_models import EstimateResult


class EstimateExporter:
    """Writes estimate results to .xlsx files with a Groups and a Summary sheet"""

    def __init__(self, currency_symbol: str = "¥"):
        self.currency_symbol = currency_symbol
        self.logger = logging.getLogger(self.__class__.__name__)

    def groups_dataframe(self, estimate: EstimateResult) -> pd.DataFrame:
        rows = []
        for breakdown in estimate.groups:
            cost = breakdown.group_cost
            rows.append({
                'group_id': cost.group_id,
                'group_name': cost.group_name,
                'quantity': cost.quantity,
                'sales_quantity': cost.sales_quantity,
                'bring_in_quantity': cost.bring_in_quantity,
                'tshirt_cost': cost.tshirt_cost,
                'product_discount': cost.product_discount,
                'silkscreen_print_cost': cost.silkscreen_print_cost,
                'dtf_print_cost': cost.dtf_print_cost,
                'setup_cost': cost.setup_cost,
                'additional_options_cost': cost.additional_options_cost,
                'custom_items_cost': cost.custom_items_cost,
                'sample_items_cost': cost.sample_items_cost,
                'group_total': cost.total_cost,
                'labor_unit_price': breakdown.labor_unit_price,
                'sales_unit_price': breakdown.sales_unit_price
            })
        return pd.DataFrame(rows, columns=[
            'group_id', 'group_name', 'quantity', 'sales_quantity', 'bring_in_quantity',
            'tshirt_cost', 'product_discount', 'silkscreen_print_cost', 'dtf_print_cost',
            'setup_cost', 'additional_options_cost', 'custom_items_cost', 'sample_items_cost',
            'group_total', 'labor_unit_price', 'sales_unit_price'
        ])

    def summary_dataframe(self, estimate: EstimateResult) -> pd.DataFrame:
        summary = [
            ('Total quantity', estimate.total_quantity),
            ('T-shirt cost', estimate.tshirt_cost),
            ('Print cost', estimate.print_cost),
            ('Setup cost', estimate.setup_cost),
            ('Additional options', estimate.additional_options_cost),
            ('Custom items', estimate.custom_items_cost),
            ('Sample items', estimate.sample_items_cost),
            ('Product discount', estimate.product_discount),
            ('Subtotal', estimate.subtotal),
            ('Shipping', estimate.shipping_cost),
            ('Tax', estimate.tax),
            ('Total (tax incl.)', estimate.total_cost_with_tax),
            ('Cost per shirt', estimate.cost_per_shirt),
        ]
        return pd.DataFrame(summary, columns=['label', f'value ({self.currency_symbol})'])

    def export(self, estimate: EstimateResult, output_folder: str) -> str:
        """Write the workbook and return its file name"""
        os.makedirs(output_folder, exist_ok=True)
        filename = f"estimate_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:6]}.xlsx"
        filepath = os.path.join(output_folder, filename)

        with pd.ExcelWriter(filepath, engine='openpyxl') as writer:
            self.groups_dataframe(estimate).to_excel(writer, sheet_name='Groups', index=False)
            self.summary_dataframe(estimate).to_excel(writer, sheet_name='Summary', index=False)

        self.logger.info(f"Exported {len(estimate.groups)} groups to {filepath}")
        return filename
