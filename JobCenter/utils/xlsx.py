from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from io import BytesIO
from typing import Iterable, List, Sequence

from django.http import HttpResponse
from django.utils import timezone

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Columns holding free text are left aligned; everything else is centred
TEXT_COLUMN_HINTS = ("name", "description", "remarks", "message", "details", "operator")


def sanitize_value(raw: object) -> object:
    """
    Prepare a value for XLSX cells while preserving numeric types.

    - Keep ints/floats/Decimals numeric so Excel treats them as numbers.
    - Aware datetimes become local naive ones; openpyxl rejects tzinfo.
    - Strip illegal control chars from text.
    """
    if raw is None:
        return ""
    if isinstance(raw, bool):
        return "Yes" if raw else "No"
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else raw
    if isinstance(raw, Decimal):
        if raw == raw.to_integral_value():
            return int(raw)
        return float(raw)
    if isinstance(raw, datetime):
        if timezone.is_aware(raw):
            raw = timezone.make_naive(raw)
        return raw
    return ILLEGAL_CHARACTERS_RE.sub("", str(raw))


def base_styles():
    """Return the shared style objects used across XLSX exports."""
    thin_side = Side(style="thin", color="FFE5E7EB")
    return {
        "title_font": Font(name="Calibri", bold=True, size=14),
        "header_font": Font(name="Calibri", bold=True, size=11),
        "cell_font": Font(name="Calibri", size=11),
        "center_header": Alignment(horizontal="center", vertical="center", wrap_text=True),
        "left_cell": Alignment(horizontal="left", vertical="center", wrap_text=True),
        "center_cell": Alignment(horizontal="center", vertical="center", wrap_text=True),
        "header_fill": PatternFill("solid", fgColor="FFF9FAFB"),
        "border": Border(left=thin_side, right=thin_side, top=thin_side, bottom=thin_side),
    }


def _safe_table_name(base: str, existing: set[str]) -> str:
    cleaned = "".join(ch if ch.isalnum() else "_" for ch in (base or "Table")) or "Table"
    if cleaned[0].isdigit():
        cleaned = f"T{cleaned}"
    candidate = cleaned
    counter = 1
    while candidate in existing:
        candidate = f"{cleaned}_{counter}"
        counter += 1
    return candidate


def _is_text_column(label: str) -> bool:
    needle = str(label).lower()
    return any(hint in needle for hint in TEXT_COLUMN_HINTS)


def write_table(
    ws,
    headers: Sequence[str],
    rows: Iterable[Sequence[object]],
    *,
    start_row: int = 1,
    column_widths: Sequence[int] | None = None,
    table_name: str | None = None,
    add_table: bool = True,
):
    """Write a styled table (header + rows) and optionally add an Excel table style."""
    styles = base_styles()
    header_row_idx = start_row

    for col_idx, label in enumerate(headers, start=1):
        c = ws.cell(row=header_row_idx, column=col_idx, value=label)
        c.font = styles["header_font"]
        c.alignment = styles["center_header"]
        c.fill = styles["header_fill"]
        c.border = styles["border"]

    text_columns = {idx for idx, label in enumerate(headers, start=1) if _is_text_column(label)}
    row_idx = header_row_idx + 1
    for data_row in rows:
        for col_idx, raw_value in enumerate(data_row, start=1):
            c = ws.cell(row=row_idx, column=col_idx, value=sanitize_value(raw_value))
            c.font = styles["cell_font"]
            c.alignment = styles["left_cell"] if col_idx in text_columns else styles["center_cell"]
            c.border = styles["border"]
            if isinstance(c.value, datetime):
                c.number_format = "yyyy-mm-dd hh:mm"
        row_idx += 1

    widths = column_widths or []
    for col_idx in range(1, len(headers) + 1):
        width = widths[col_idx - 1] if col_idx - 1 < len(widths) else 20
        ws.column_dimensions[get_column_letter(col_idx)].width = width

    data_end = row_idx - 1
    # An Excel table needs at least one data row
    if add_table and data_end > header_row_idx:
        existing = set(ws.tables.keys())
        name = _safe_table_name(table_name or f"Table{len(existing) + 1}", existing)
        table = Table(displayName=name, ref=f"A{header_row_idx}:{get_column_letter(len(headers))}{data_end}")
        table.tableStyleInfo = TableStyleInfo(
            name="TableStyleMedium9",
            showFirstColumn=False,
            showLastColumn=False,
            showRowStripes=True,
            showColumnStripes=False,
        )
        ws.add_table(table)

    return header_row_idx, data_end


def build_workbook(
    *,
    sheet_title: str,
    report_title: str | None,
    headers: List[str],
    rows: Iterable[Sequence[object]],
    column_widths: Sequence[int] | None = None,
    subtitle: str | None = None,
    include_timestamp: bool = True,
    table_name: str | None = None,
) -> Workbook:
    """
    Build a single-sheet workbook with a merged title row, an optional
    generated-at subtitle and a banded Excel table.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = (sheet_title or "Report")[:31]

    styles = base_styles()
    row_idx = 1

    if report_title:
        ws.merge_cells(start_row=row_idx, start_column=1, end_row=row_idx, end_column=len(headers))
        c = ws.cell(row=row_idx, column=1, value=report_title)
        c.font = styles["title_font"]
        c.alignment = styles["center_header"]
        row_idx += 1

    ts_text = subtitle
    if include_timestamp and not subtitle:
        ts_text = f"Generated: {timezone.localtime(timezone.now()):%Y-%m-%d %H:%M}"
    if ts_text:
        ws.merge_cells(start_row=row_idx, start_column=1, end_row=row_idx, end_column=len(headers))
        c = ws.cell(row=row_idx, column=1, value=ts_text)
        c.font = styles["cell_font"]
        c.alignment = styles["left_cell"]
        row_idx += 1

    write_table(
        ws,
        headers=headers,
        rows=rows,
        start_row=row_idx,
        column_widths=column_widths,
        table_name=table_name,
    )
    return wb


def build_table_response(*, filename: str, **kwargs) -> HttpResponse:
    """Render ``build_workbook(**kwargs)`` as an attachment download."""
    wb = build_workbook(**kwargs)
    bio = BytesIO()
    wb.save(bio)
    resp = HttpResponse(bio.getvalue(), content_type=XLSX_CONTENT_TYPE)
    resp["Content-Disposition"] = f"attachment; filename={filename}"
    return resp
