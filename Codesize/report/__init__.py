from Codesize.report.report_driver import (
    SizeReport, select_contracts, sort_records, measure_build_info, build_report, contract_sizes
)
from Codesize.report.table import render_table, oversized_contracts

__all__ = [
    "SizeReport", "select_contracts", "sort_records", "measure_build_info", "build_report",
    "contract_sizes", "render_table", "oversized_contracts"
]
