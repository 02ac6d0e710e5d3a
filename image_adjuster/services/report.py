# HTML analysis report
"""
Renders the per-image contrast limits as an HTML table.

Each cutoff percentage gets a Min / Max column pair. The first data row holds
the averages; an image whose min is below the average min, or whose max is
above the average max, would be stretched harder than that image needs if the
averages were applied, so the cell is marked with the ``warning`` class.
"""
import html
import os
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from .analysis_service import AnalysisRecord, average_limits
from ..utils.errors import FileIOError
from ..utils.logger import get_logger

logger = get_logger(__name__)

INDENT = "    "

STYLE_RULES = (
    "body { margin: 0; }",
    "table { margin: 20px; border-collapse: collapse; }",
    "table, th, td { border: 1px solid gray; }",
    "th, td { padding: 10px; }",
    ".warning { background-color: yellow; }",
)


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """Compact UTC timestamp used in report and log file names, e.g. 20260101T120000Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def format_cutoff(cutoff: float) -> str:
    return f"{cutoff:g}%"


def _element(level, name, value, **attributes):
    attrs = "".join(f' {key}="{html.escape(str(val))}"' for key, val in attributes.items())
    return f"{INDENT * level}<{name}{attrs}>{html.escape(str(value))}</{name}>"


def _warning(flag):
    return {"class": "warning"} if flag else {}


def render_analysis_report(records: Sequence[AnalysisRecord], cutoffs: Sequence[float]) -> str:
    """Builds the report document for a list of AnalysisRecords."""
    cutoffs = [float(c) for c in cutoffs]
    averages = {cutoff: average_limits(records, cutoff) for cutoff in cutoffs}

    lines: List[str] = ["<html>", f"{INDENT}<head>"]
    lines.append(_element(2, "title", "Image Analysis Report"))
    lines.append(f"{INDENT * 2}<style>")
    lines.extend(f"{INDENT * 3}{rule}" for rule in STYLE_RULES)
    lines.append(f"{INDENT * 2}</style>")
    lines.append(f"{INDENT}</head>")
    lines.append(f"{INDENT}<body>")
    lines.append(f"{INDENT * 2}<table>")

    # Header rows
    lines.append(f"{INDENT * 3}<tr>")
    lines.append(_element(4, "th", "Average/Image", rowspan="2"))
    for cutoff in cutoffs:
        lines.append(_element(4, "th", format_cutoff(cutoff), colspan="2"))
    lines.append(f"{INDENT * 3}</tr>")
    lines.append(f"{INDENT * 3}<tr>")
    for _ in cutoffs:
        lines.append(_element(4, "th", "Min"))
        lines.append(_element(4, "th", "Max"))
    lines.append(f"{INDENT * 3}</tr>")

    lines.append(f"{INDENT * 3}<tr>")
    lines.append(_element(4, "td", "Average"))
    for cutoff in cutoffs:
        lines.append(_element(4, "td", averages[cutoff].min_value))
        lines.append(_element(4, "td", averages[cutoff].max_value))
    lines.append(f"{INDENT * 3}</tr>")

    for record in records:
        lines.append(f"{INDENT * 3}<tr>")
        lines.append(_element(4, "td", record.filename))
        for cutoff in cutoffs:
            limits, average = record.limits[cutoff], averages[cutoff]
            lines.append(_element(4, "td", limits.min_value, **_warning(limits.min_value < average.min_value)))
            lines.append(_element(4, "td", limits.max_value, **_warning(limits.max_value > average.max_value)))
        lines.append(f"{INDENT * 3}</tr>")

    lines.append(f"{INDENT * 2}</table>")
    lines.append(f"{INDENT}</body>")
    lines.append("</html>")
    return "\n".join(lines) + "\n"


def write_analysis_report(records: Sequence[AnalysisRecord], cutoffs: Sequence[float], output_dir: str,
                          prefix: str = "Analyzed-", now: Optional[datetime] = None) -> str:
    """Writes the report to ``output_dir/<prefix><timestamp>.htm`` and returns the path.

    Raises:
        FileIOError: if the directory or file cannot be written.
    """
    report_path = os.path.join(output_dir, f"{prefix}{utc_timestamp(now)}.htm")
    document = render_analysis_report(records, cutoffs)
    try:
        os.makedirs(output_dir, exist_ok=True)
        with open(report_path, "w", encoding="utf-8") as f:
            f.write(document)
    except OSError as e:
        raise FileIOError(f"Could not write analysis report {report_path}",
                          file_path=report_path, original_error=e) from e
    logger.info("Analysis report saved to: %s", report_path)
    return report_path
