from Codesize.aggregate.source_table import SourceTable, ScopedSourceTable, PSEUDO_SOURCES
from Codesize.aggregate.aggregator import aggregate

__all__ = ["SourceTable", "ScopedSourceTable", "PSEUDO_SOURCES", "aggregate"]
