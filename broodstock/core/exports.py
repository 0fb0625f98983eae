"""
CSV and Excel export helpers for the list endpoints.

Columns are ``(header, accessor)`` pairs; an accessor is either a key of the
record or a callable taking the record.
"""
import csv
from datetime import date
from io import BytesIO

from django.http import HttpResponse
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

# Excel column width bounds (characters)
MIN_COLUMN_WIDTH = 10
MAX_COLUMN_WIDTH = 50


def export_filename(title, today=None, extension='csv'):
    today = today or date.today()
    return f"{'_'.join(title.split())}_{today.isoformat()}.{extension}"


def _cell(record, accessor):
    if callable(accessor):
        return accessor(record)
    value = record.get(accessor)
    return '' if value is None else value


def _attachment(content_type, filename, content=b''):
    response = HttpResponse(content, content_type=content_type)
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


def write_csv(rows, columns, filename):
    """Return a text/csv attachment response with one line per row"""
    response = _attachment('text/csv; charset=utf-8', filename)

    writer = csv.writer(response)
    writer.writerow([header for header, _ in columns])
    for record in rows:
        writer.writerow([_cell(record, accessor) for _, accessor in columns])
    return response


def write_xlsx(rows, columns, filename):
    """
    Return an .xlsx attachment with a single ``Data`` sheet.

    The header row is bold on a light grey fill; column widths follow the
    longest value, clamped to MIN_COLUMN_WIDTH..MAX_COLUMN_WIDTH.
    """
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = 'Data'

    headers = [header for header, _ in columns]
    sheet.append(headers)
    for record in rows:
        sheet.append([_cell(record, accessor) for _, accessor in columns])

    header_font = Font(bold=True)
    header_fill = PatternFill(start_color='EEEEEE', end_color='EEEEEE', fill_type='solid')
    for cell in sheet[1]:
        cell.font = header_font
        cell.fill = header_fill

    for index in range(1, len(headers) + 1):
        letter = get_column_letter(index)
        longest = max(len(str(cell.value or '')) for cell in sheet[letter])
        sheet.column_dimensions[letter].width = min(max(longest + 2, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH)

    buffer = BytesIO()
    workbook.save(buffer)
    return _attachment(XLSX_CONTENT_TYPE, filename, buffer.getvalue())


def address_city_country(field):
    """Accessor flattening a nested address dict to ``City, Country``"""
    def accessor(record):
        address = record.get(field) or {}
        return ', '.join(part for part in (address.get('city'), address.get('country')) if part)
    return accessor
