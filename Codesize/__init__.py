"""
Codesize: attribution of EVM contract bytecode size to source files.
"""
from typing import TYPE_CHECKING

# Lazy import
if TYPE_CHECKING:
    from Codesize.report.report_driver import contract_sizes

def __getattr__(name: str):
    if name == "contract_sizes":
        from Codesize.report.report_driver import contract_sizes
        return contract_sizes
    raise AttributeError(f"module {__name__} has no attribute {name}")

__all__ = ["contract_sizes"]
