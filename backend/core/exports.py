"""
Export utilities for ledger data.
Supports Excel (.xlsx), CSV (.csv), Text (.txt) and PDF (.pdf) formats.
"""
import csv
import io
import logging
import os
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from xml.sax.saxutils import escape

from django.conf import settings
from django.http import HttpResponse
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, Border, Side, PatternFill
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.platypus import LongTable, Paragraph, SimpleDocTemplate, Spacer, TableStyle

logger = logging.getLogger(__name__)


class ExportFormat:
    EXCEL = 'xlsx'
    CSV = 'csv'
    TXT = 'txt'
    PDF = 'pdf'

    CHOICES = [EXCEL, CSV, TXT, PDF]
    CONTENT_TYPES = {
        EXCEL: 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        CSV: 'text/csv',
        TXT: 'text/plain',
        PDF: 'application/pdf',
    }


def format_value(value: Any) -> str:
    """Format a value for export."""
    if value is None:
        return ''
    if isinstance(value, datetime):
        return value.strftime('%Y-%m-%d %H:%M:%S')
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, bool):
        return 'نعم' if value else 'لا'
    return str(value)


def export_to_excel(
    data: list[dict],
    columns: list[dict],
    title: str = 'Export',
    sheet_name: str = 'Data',
) -> bytes:
    """
    Export data to Excel format.

    Args:
        data: List of dictionaries containing the data
        columns: List of column definitions with 'key', 'header', and optional 'width'
        title: Title for the export (used in header row)
        sheet_name: Name of the worksheet

    Returns:
        Bytes of the Excel file
    """
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name[:31]
    ws.sheet_view.rightToLeft = True

    header_font = Font(bold=True, color='FFFFFF')
    header_fill = PatternFill(start_color='4472C4', end_color='4472C4', fill_type='solid')
    header_alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)
    thin_border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )
    span = max(len(columns), 1)

    # Title row
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=span)
    title_cell = ws.cell(row=1, column=1, value=title)
    title_cell.font = Font(bold=True, size=14)
    title_cell.alignment = Alignment(horizontal='center')

    # Export timestamp
    ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=span)
    timestamp_cell = ws.cell(row=2, column=1, value=f"تاريخ التصدير: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    timestamp_cell.alignment = Alignment(horizontal='center')
    timestamp_cell.font = Font(italic=True, size=10, color='666666')

    header_row = 4
    for col_idx, col in enumerate(columns, 1):
        cell = ws.cell(row=header_row, column=col_idx, value=col['header'])
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = header_alignment
        cell.border = thin_border
        ws.column_dimensions[get_column_letter(col_idx)].width = col.get('width', 15)

    for row_idx, row_data in enumerate(data, header_row + 1):
        for col_idx, col in enumerate(columns, 1):
            value = row_data.get(col['key'], '')
            if col.get('numeric') and isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
                cell = ws.cell(row=row_idx, column=col_idx, value=float(value))
            else:
                cell = ws.cell(row=row_idx, column=col_idx, value=format_value(value))
            cell.border = thin_border
            if col.get('numeric'):
                cell.alignment = Alignment(horizontal='right')

    ws.freeze_panes = ws.cell(row=header_row + 1, column=1)

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output.getvalue()


def export_to_csv(
    data: list[dict],
    columns: list[dict],
    delimiter: str = ',',
) -> str:
    """Export data to CSV format. The BOM is added when encoding."""
    output = io.StringIO()
    writer = csv.writer(output, delimiter=delimiter, quoting=csv.QUOTE_MINIMAL)

    writer.writerow([col['header'] for col in columns])
    for row_data in data:
        writer.writerow([format_value(row_data.get(col['key'], '')) for col in columns])

    return output.getvalue()


def export_to_txt(
    data: list[dict],
    columns: list[dict],
    separator: str = ' | ',
    title: str = '',
) -> str:
    """
    Export data to fixed-width text.

    Column widths grow to fit the data, capped at 50 characters.
    """
    lines = []
    if title:
        lines.append(title)
        lines.append('=' * len(title))

    col_widths = []
    for col in columns:
        width = col.get('width', len(col['header']))
        for row_data in data:
            width = max(width, len(format_value(row_data.get(col['key'], ''))))
        col_widths.append(min(width, 50))

    lines.append(separator.join(col['header'].ljust(col_widths[idx]) for idx, col in enumerate(columns)))
    lines.append(separator.join('-' * col_widths[idx] for idx in range(len(columns))))

    for row_data in data:
        row_parts = []
        for idx, col in enumerate(columns):
            value = format_value(row_data.get(col['key'], ''))
            if len(value) > col_widths[idx]:
                value = value[:col_widths[idx] - 3] + '...'
            row_parts.append(value.ljust(col_widths[idx]))
        lines.append(separator.join(row_parts))

    lines.append('')
    lines.append(f"إجمالي السجلات: {len(data)}")
    return '\n'.join(lines)


# Arabic-capable TTFs tried in order; PDF_FONT_PATH in settings wins.
PDF_FONT_CANDIDATES = [
    '/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf',
    '/usr/share/fonts/truetype/noto/NotoSansArabic-Regular.ttf',
    '/usr/share/fonts/truetype/noto/NotoNaskhArabic-Regular.ttf',
    '/usr/share/fonts/TTF/DejaVuSans.ttf',
    'C:/Windows/Fonts/arial.ttf',
]
PDF_FONT_NAME = 'LedgerSans'
PDF_FALLBACK_FONT = 'Helvetica'

_pdf_font = None


def pdf_font() -> str:
    """Register the export font once and return its name."""
    global _pdf_font
    if _pdf_font is not None:
        return _pdf_font

    candidates = [getattr(settings, 'PDF_FONT_PATH', None)] + PDF_FONT_CANDIDATES
    _pdf_font = PDF_FALLBACK_FONT
    for path in candidates:
        if not path or not os.path.exists(path):
            continue
        try:
            pdfmetrics.registerFont(TTFont(PDF_FONT_NAME, path))
        except TTFError as exc:
            logger.warning("Could not load PDF font", extra={"path": path, "error": str(exc)})
            continue
        _pdf_font = PDF_FONT_NAME
        break
    else:
        logger.warning("No TTF font found for PDF exports; Arabic text will not render")
    return _pdf_font


def export_to_pdf(
    data: list[dict],
    columns: list[dict],
    title: str = 'Export',
) -> bytes:
    """
    Export data to a PDF table.

    Pages switch to landscape past six columns. Column widths keep the
    proportions of each column's 'width'.
    """
    font = pdf_font()
    pagesize = landscape(A4) if len(columns) > 6 else A4
    margin = 12 * mm

    output = io.BytesIO()
    doc = SimpleDocTemplate(
        output,
        pagesize=pagesize,
        leftMargin=margin,
        rightMargin=margin,
        topMargin=margin,
        bottomMargin=margin,
        title=title,
    )

    styles = getSampleStyleSheet()
    title_style = styles['Title']
    title_style.fontName = font
    meta_style = styles['Normal']
    meta_style.fontName = font
    meta_style.fontSize = 9
    meta_style.textColor = colors.HexColor('#666666')

    story = [
        Paragraph(escape(title), title_style),
        Paragraph(escape(f"تاريخ التصدير: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"), meta_style),
        Spacer(1, 6 * mm),
    ]

    rows = [[col['header'] for col in columns]]
    for row_data in data:
        rows.append([format_value(row_data.get(col['key'], '')) for col in columns])

    available = pagesize[0] - 2 * margin
    weights = [col.get('width', 15) for col in columns]
    col_widths = [available * weight / sum(weights) for weight in weights]

    table = LongTable(rows, colWidths=col_widths, repeatRows=1)
    style = [
        ('FONTNAME', (0, 0), (-1, -1), font),
        ('FONTSIZE', (0, 0), (-1, -1), 8),
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#4472C4')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('ALIGN', (0, 0), (-1, 0), 'CENTER'),
        ('GRID', (0, 0), (-1, -1), 0.25, colors.grey),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
    ]
    for idx, col in enumerate(columns):
        if col.get('numeric'):
            style.append(('ALIGN', (idx, 1), (idx, -1), 'RIGHT'))
    table.setStyle(TableStyle(style))

    story.append(table)
    story.append(Spacer(1, 4 * mm))
    story.append(Paragraph(escape(f"إجمالي السجلات: {len(data)}"), meta_style))

    doc.build(story)
    return output.getvalue()


def render_export(data: list[dict], columns: list[dict], format: str, title: str = 'Export') -> bytes:
    """
    Render an export to bytes.

    Raises:
        ValueError: for an unsupported format
    """
    if format not in ExportFormat.CHOICES:
        raise ValueError(f"Invalid format: {format}. Must be one of {ExportFormat.CHOICES}")

    if format == ExportFormat.EXCEL:
        return export_to_excel(data, columns, title=title)
    if format == ExportFormat.CSV:
        # BOM for Excel compatibility
        return export_to_csv(data, columns).encode('utf-8-sig')
    if format == ExportFormat.PDF:
        return export_to_pdf(data, columns, title=title)
    return export_to_txt(data, columns, title=title).encode('utf-8')


def create_export_response(
    data: list[dict],
    columns: list[dict],
    format: str,
    filename: str,
    title: str = 'Export',
) -> HttpResponse:
    """Create an HTTP attachment response with the exported file."""
    content = render_export(data, columns, format, title=title)
    content_type = ExportFormat.CONTENT_TYPES[format]
    if format in (ExportFormat.CSV, ExportFormat.TXT):
        content_type = f"{content_type}; charset=utf-8"

    response = HttpResponse(content, content_type=content_type)
    response['Content-Disposition'] = f'attachment; filename="{filename}.{format}"'
    response['Content-Length'] = str(len(content))
    return response
