"""Template workbook handling"""

from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Tuple

import openpyxl
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from core.exceptions import TemplateError
from config import settings


class ReportWorkbook:
    """
    A template workbook being turned into a report

    The template sheet holds the placeholders and is duplicated once per
    record; the menu sheet lists the created sheets.
    """

    def __init__(
        self,
        workbook: Workbook,
        file_path: Optional[Path] = None,
        template_sheet_name: Optional[str] = None,
        menu_sheet_name: Optional[str] = None,
    ):
        self.workbook = workbook
        self.file_path = Path(file_path) if file_path else None
        self.template_sheet_name = template_sheet_name or settings.TEMPLATE_SHEET_NAME
        self.menu_sheet_name = menu_sheet_name or settings.MENU_SHEET_NAME

        missing = [
            name for name in (self.template_sheet_name, self.menu_sheet_name)
            if name not in workbook.sheetnames
        ]
        if missing:
            raise TemplateError(
                f"Template is missing sheet(s): {', '.join(missing)}",
                str(self.file_path) if self.file_path else None,
            )

        self.template: Worksheet = workbook[self.template_sheet_name]
        self.menu: Worksheet = workbook[self.menu_sheet_name]
        self._menu_row = settings.MENU_START_ROW

    @classmethod
    def open(cls, file_path: str, **kwargs) -> "ReportWorkbook":
        """Load a template workbook from disk"""
        path = Path(file_path)

        if not path.exists():
            raise TemplateError(f"File not found: {file_path}", file_path)

        try:
            workbook = openpyxl.load_workbook(
                path,
                keep_vba=path.suffix.lower() == ".xlsm",
            )
        except Exception as e:
            raise TemplateError(f"Failed to open template: {e}", file_path) from e

        return cls(workbook, file_path=path, **kwargs)

    # ─────────────────────────────────────────────────────────
    # Template grid
    # ─────────────────────────────────────────────────────────

    @property
    def template_size(self) -> int:
        """Number of cells in the template's used range"""
        sheet = self.template
        rows = sheet.max_row - sheet.min_row + 1
        cols = sheet.max_column - sheet.min_column + 1
        return rows * cols

    def template_grid(self) -> Iterator[Tuple[int, int, str]]:
        """Yield (row, col, text) for every cell of the template's used range"""
        sheet = self.template
        for row in sheet.iter_rows(
            min_row=sheet.min_row,
            max_row=sheet.max_row,
            min_col=sheet.min_column,
            max_col=sheet.max_column,
        ):
            for cell in row:
                text = "" if cell.value is None else str(cell.value)
                yield cell.row, cell.column, text

    # ─────────────────────────────────────────────────────────
    # Report sheets
    # ─────────────────────────────────────────────────────────

    def has_sheet(self, name: str) -> bool:
        """Sheet titles are case-insensitive in spreadsheet applications"""
        lowered = name.lower()
        return any(existing.lower() == lowered for existing in self.workbook.sheetnames)

    def add_report_sheet(self, name: str) -> Worksheet:
        """Copy the template into a new sheet placed just before it"""
        if self.has_sheet(name):
            raise TemplateError(f"Sheet already exists: {name}")

        sheet = self.workbook.copy_worksheet(self.template)
        sheet.title = name

        template_index = self.workbook.index(self.template)
        self.workbook.move_sheet(sheet, offset=template_index - self.workbook.index(sheet))
        return sheet

    def append_menu_entry(self, name: str) -> int:
        """Write a sheet name on the next empty menu row and return the row"""
        column = settings.MENU_NAME_COLUMN
        row = self._menu_row

        while not self._is_blank(self.menu.cell(row=row, column=column).value):
            row += 1

        self.menu.cell(row=row, column=column).value = name
        self._menu_row = row
        return row

    def finalize(self) -> None:
        """Move the template last and make the menu the active sheet"""
        last_index = len(self.workbook.sheetnames) - 1
        self.workbook.move_sheet(self.template, offset=last_index - self.workbook.index(self.template))

        for sheet in self.workbook.worksheets:
            sheet.sheet_view.tabSelected = False
        self.menu.sheet_view.tabSelected = True
        self.workbook.active = self.workbook.index(self.menu)

    def output_path(self, output_dir: Optional[Path] = None, now: Optional[datetime] = None) -> Path:
        """Timestamped output file name next to the template (or in output_dir)"""
        suffix = self.file_path.suffix if self.file_path else ".xlsx"
        stamp = (now or datetime.now()).strftime("%Y-%m-%d-%H-%M-%S")

        if output_dir is None:
            if self.file_path is None:
                raise TemplateError("No output directory for an in-memory template")
            output_dir = settings.get_output_path(self.file_path)

        return Path(output_dir) / f"out-{stamp}{suffix}"

    def save(self, file_path: Path) -> Path:
        self.workbook.save(file_path)
        return file_path

    @staticmethod
    def _is_blank(value) -> bool:
        return value is None or not str(value).strip()
