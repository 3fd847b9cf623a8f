from .format import format_timestamp, render_report
from .json_output import page_document, render_json

__all__ = ["format_timestamp", "render_report", "page_document", "render_json"]
