"""Export module: insight reports in several formats."""

from collections.abc import Callable

from obex.constants import ExportFormat
from obex.export.json_export import export_json
from obex.export.markdown import export_markdown
from obex.models.insight import Insight

__all__ = [
    "export_insights",
    "export_json",
    "export_markdown",
]

_EXPORTERS: dict[str, Callable[[list[Insight]], str]] = {
    ExportFormat.MARKDOWN: export_markdown,
    ExportFormat.JSON: export_json,
}


def export_insights(
    insights: list[Insight],
    fmt: str = "markdown",
) -> str:
    """Dispatch export by format string."""
    exporter = _EXPORTERS.get(fmt)
    if exporter is None:
        valid = ", ".join(_EXPORTERS)
        msg = f"Unsupported format: {fmt}. Use: {valid}"
        raise ValueError(msg)
    return exporter(insights)
