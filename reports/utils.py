# reports/utils.py
from openpyxl.styles import Font, Alignment, PatternFill
from openpyxl.utils import get_column_letter

HEADER_FILL = PatternFill(start_color='1A5F2A', end_color='1A5F2A', fill_type='solid')


def style_header_row(sheet, row_number=1):
    """Bold white text on the mosque green, centred, for every cell in the row."""
    header_font = Font(bold=True, name='Calibri', size=12, color='FFFFFF')
    center_alignment = Alignment(horizontal='center', vertical='center')

    for cell in sheet[row_number]:
        if cell.value is None:
            continue
        cell.font = header_font
        cell.fill = HEADER_FILL
        cell.alignment = center_alignment


def adjust_column_widths(sheet, max_width=60):
    """
    Fit each column to its longest value.
    Merged cell placeholders have no value and are skipped.
    """
    for col_idx in range(1, sheet.max_column + 1):
        column_letter = get_column_letter(col_idx)
        lengths = [len(str(cell.value)) for cell in sheet[column_letter] if cell.value is not None]
        longest = max(lengths, default=0)
        sheet.column_dimensions[column_letter].width = min(longest + 2, max_width)
