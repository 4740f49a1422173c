from .placeholders import PlaceholderParser, parse_placeholder
from .scanner import TemplateScanner
from .workbook import ReportWorkbook

__all__ = ["PlaceholderParser", "parse_placeholder", "TemplateScanner", "ReportWorkbook"]
