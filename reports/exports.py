"""
CSV and XLSX renderings of evaluation records and lecturer scores.

CSV output uses minimal quoting (only fields holding a comma, a quote or a
line break are quoted), "\n" between lines and no trailing newline, so a
file with N records has exactly N + 1 lines when no field contains a line
break. Text is written as entered; nothing is escaped beyond CSV quoting.
"""
import csv
from io import BytesIO, StringIO

import openpyxl

from analytics.calculations import UNKNOWN_LECTURER
from analytics.insights import calculate_trend
from core.utils import to_fixed, signed
from .utils import style_header_row, adjust_column_widths

CSV_HEADERS = [
    'Nama Penilai', 'Umur', 'Alamat', 'Tarikh Penilaian', 'Penceramah', 'Minggu', 'Jenis Kuliah',
    'Tajuk (Q1)', 'Ilmu (Q2)', 'Penyampaian (Q3)', 'Masa (Q4)', 'Purata', 'Gred',
    'Komen Penceramah', 'Cadangan Masjid',
]

REQUIRED_CSV_HEADERS = [h for h in CSV_HEADERS if h not in ('Purata', 'Gred')]

LECTURER_SUMMARY_HEADERS = [
    'Penceramah', 'Tajuk (Q1)', 'Ilmu (Q2)', 'Penyampaian (Q3)', 'Masa (Q4)',
    'Purata Keseluruhan', 'Gred', 'Bil. Penilaian', 'Trend', 'Tahap Risiko',
]

TREND_LABELS = {'up': 'Meningkat', 'down': 'Menurun'}
RISK_LABELS = {'high': 'Tinggi', 'medium': 'Sederhana'}


def get_grade(score):
    if score >= 3.5:
        return 'A - Cemerlang'
    if score >= 3.0:
        return 'B - Baik'
    if score >= 2.5:
        return 'C - Sederhana'
    if score >= 2.0:
        return 'D - Perlu Perhatian'
    return 'E - Kritikal'


def trend_label(trend):
    return TREND_LABELS.get(trend, 'Stabil')


def risk_label(risk_level):
    return RISK_LABELS.get(risk_level, 'Rendah')


def _render(rows):
    buffer = StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerows(rows)
    text = buffer.getvalue()
    return text[:-1] if text.endswith('\n') else text


def evaluation_row(e):
    score = e.score
    return [
        e.evaluator_name,
        e.age,
        e.address,
        e.evaluation_date,
        e.lecturer_name or UNKNOWN_LECTURER,
        e.week or '',
        e.lecture_type or '',
        e.q1_topic,
        e.q2_knowledge,
        e.q3_delivery,
        e.q4_time,
        to_fixed(score),
        get_grade(score),
        e.lecturer_comment or '',
        e.mosque_suggestion or '',
    ]


def generate_csv(evaluations):
    return _render([CSV_HEADERS] + [evaluation_row(e) for e in evaluations])


def generate_lecturer_summary_csv(scores):
    rows = [LECTURER_SUMMARY_HEADERS]
    for s in scores:
        rows.append([
            s.lecturer_name,
            to_fixed(s.avg_q1),
            to_fixed(s.avg_q2),
            to_fixed(s.avg_q3),
            to_fixed(s.avg_q4),
            to_fixed(s.avg_overall),
            get_grade(s.avg_overall),
            s.total_evaluations,
            trend_label(s.trend),
            risk_label(s.risk_level),
        ])
    return _render(rows)


def generate_executive_summary_csv(summary):
    rows = [
        ['LAPORAN RINGKASAN EKSEKUTIF'],
        [],
        ['Tempoh', summary.period],
        ['Jumlah Penilaian', summary.total_evaluations],
        ['Jumlah Penceramah', summary.total_lecturers],
        ['Purata Skor Keseluruhan', to_fixed(summary.average_score)],
        ['Gred Keseluruhan', get_grade(summary.average_score)],
        [],
        ['PRESTASI'],
        ['Prestasi Terbaik', summary.top_performer or '-'],
        ['Perlu Perhatian', summary.needs_attention or '-'],
        [],
        ['KEKUATAN'],
    ]
    rows.extend([i, text] for i, text in enumerate(summary.strengths, start=1))
    rows.append([])
    rows.append(['BIDANG PENAMBAHBAIKAN'])
    rows.extend([i, text] for i, text in enumerate(summary.improvements, start=1))
    return _render(rows)


def generate_comparison_csv(current_label, current_scores, previous_label, previous_scores):
    """
    One row per lecturer of the current period, matched to the previous
    period by lecturer name. Lecturers with no previous score are marked
    "Baru" and count as stable.
    """
    previous = {s.lecturer_name: s.avg_overall for s in previous_scores}
    rows = [[
        'Penceramah',
        f"Purata ({current_label})",
        f"Purata ({previous_label})",
        'Perubahan',
        'Trend',
    ]]
    for s in current_scores:
        before = previous.get(s.lecturer_name)
        if before is None:
            change, trend = 'Baru', 'stable'
        else:
            change, trend = signed(s.avg_overall - before), calculate_trend(s.avg_overall, before)
        rows.append([
            s.lecturer_name,
            to_fixed(s.avg_overall),
            to_fixed(before) if before is not None else '-',
            change,
            trend_label(trend),
        ])
    return _render(rows)


def validate_csv_export(csv_text, evaluations):
    """True when every required header is present and there is one line per record plus the header."""
    lines = csv_text.split('\n')
    header = lines[0]
    if any(h not in header for h in REQUIRED_CSV_HEADERS):
        return False
    return len(lines) == len(evaluations) + 1


def generate_workbook(evaluations, scores, summary):
    """Two-sheet XLSX: the executive summary with lecturer scores, then the raw records."""
    wb = openpyxl.Workbook()

    sheet = wb.active
    sheet.title = "Ringkasan"
    sheet.append([f"Laporan Penilaian Kuliah ({summary.period})"])
    sheet.merge_cells('A1:D1')
    sheet.append([])
    sheet.append(['Perkara', 'Nilai'])
    sheet.append(['Jumlah Penilaian', summary.total_evaluations])
    sheet.append(['Jumlah Penceramah', summary.total_lecturers])
    sheet.append(['Purata Skor Keseluruhan', round(summary.average_score, 2)])
    sheet.append(['Gred Keseluruhan', get_grade(summary.average_score)])
    sheet.append(['Prestasi Terbaik', summary.top_performer or '-'])
    sheet.append(['Perlu Perhatian', summary.needs_attention or '-'])
    style_header_row(sheet, row_number=3)

    sheet.append([])
    sheet.append(LECTURER_SUMMARY_HEADERS)
    header_row = sheet.max_row
    for s in scores:
        sheet.append([
            s.lecturer_name,
            round(s.avg_q1, 2), round(s.avg_q2, 2), round(s.avg_q3, 2), round(s.avg_q4, 2),
            round(s.avg_overall, 2),
            get_grade(s.avg_overall),
            s.total_evaluations,
            trend_label(s.trend),
            risk_label(s.risk_level),
        ])
    style_header_row(sheet, row_number=header_row)
    adjust_column_widths(sheet)

    raw = wb.create_sheet("Penilaian")
    raw.append(CSV_HEADERS)
    for e in evaluations:
        row = evaluation_row(e)
        row[11] = round(e.score, 2)
        raw.append(row)
    style_header_row(raw)
    adjust_column_widths(raw)

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
