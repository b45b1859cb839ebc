from typing import Dict, List, Optional

from Codesize.core.config import MAX_CONTRACT_SIZE
from Codesize.core.types import SizeRecord
from Codesize.report.report_driver import SizeReport

WARN_RATIO = 0.85
DELTA_COLUMN = "±code"
RIGHT_ALIGNED = {"code%", "code", DELTA_COLUMN, "init"}

def oversized_contracts(records: List[SizeRecord], max_contract_size: int = MAX_CONTRACT_SIZE) -> List[SizeRecord]:
    return [r for r in records if r.code_size > max_contract_size]

def _size_marker(code_size: int, max_contract_size: int) -> str:
    if code_size > max_contract_size:
        return " !"
    if code_size > max_contract_size * WARN_RATIO:
        return " ~"
    return ""

def _fmt_delta(d: Optional[int]) -> str:
    if d is None:
        return ""
    return f"+{d:,}" if d > 0 else f"-{-d:,}"

def _pct(part: int, whole: int) -> str:
    if whole <= 0:
        return ""
    return f"{round(part * 100 / whole)}%"

def render_table(report: SizeReport, details: bool = False,
                 max_contract_size: int = MAX_CONTRACT_SIZE) -> str:
    """
    Renders the report as an aligned text table. Runtime sizes over the limit
    are marked `!`, sizes over 85% of it `~`.
    """
    columns = ["contract"]
    if details:
        columns += ["source", "code%"]
    columns.append("code")
    if report.diffed:
        columns.append(DELTA_COLUMN)
    columns.append("init")

    rows: List[Optional[Dict[str, str]]] = []
    for rec in report.records:
        delta = report.deltas.get(rec.name)
        if details:
            if rows:
                rows.append(None)
            for s in rec.sources:
                sd = delta.sources.get(s.file_name) if delta else None
                rows.append({
                    "contract": rec.name,
                    "source": s.file_name,
                    "code%": _pct(s.code_size, rec.code_size),
                    "code": f"{s.code_size:,}",
                    DELTA_COLUMN: _fmt_delta(sd.code_size if sd else None),
                    "init": f"{s.init_size:,}",
                })
        rows.append({
            "contract": rec.name,
            "source": "== Total" if details and rec.sources else "",
            "code": f"{rec.code_size:,}{_size_marker(rec.code_size, max_contract_size)}",
            DELTA_COLUMN: _fmt_delta(delta.code_size if delta else None),
            "init": f"{rec.init_size:,}",
        })

    widths = {c: len(c) for c in columns}
    for row in rows:
        if row:
            for c in columns:
                widths[c] = max(widths[c], len(row.get(c, "")))

    def fmt(values: Dict[str, str]) -> str:
        cells = []
        for c in columns:
            v = values.get(c, "")
            cells.append(f"{v:>{widths[c]}}" if c in RIGHT_ALIGNED else f"{v:<{widths[c]}}")
        return "  ".join(cells).rstrip()

    header = fmt({c: c for c in columns})
    lines = [header, "-" * len(header)]
    for row in rows:
        lines.append(fmt(row) if row else "")
    return "\n".join(lines)
