"""
PDF evaluation report built with reportlab platypus.

The payload is a plain dict:

    {
        'title': str,
        'date_range': {'from': 'YYYY-MM-DD', 'to': 'YYYY-MM-DD'},
        'summary_stats': {'total_evaluations', 'average_score',
                          'recommendation_yes', 'recommendation_no'},
        'lecturer_scores': [LecturerScore, ...],
        'evaluations': [EvaluationRecord, ...],
        'insights': Insights or None,
        'comparison': {'change_percent': {'score': float}} or None,
    }

Documents are rendered with ``invariant=True`` and an explicit generation
date, so identical payloads give identical bytes.
"""
import logging
from io import BytesIO
from xml.sax.saxutils import escape

from django.conf import settings
from reportlab.lib import colors
from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from analytics.insights import EXCELLENT, LOW
from core.utils import to_fixed, signed

logger = logging.getLogger(__name__)

GREEN = HexColor('#1a5f2a')
RED = HexColor('#dc3545')
SUMMARY_FILL = HexColor('#f0f7f1')
INSIGHT_FILL = HexColor('#fffaf0')

MAX_EVALUATION_ROWS = 20
STATS_FIELDS = ('total_evaluations', 'average_score', 'recommendation_yes', 'recommendation_no')
STATUS_LABELS = {'high': 'Perhatian', 'medium': 'Sederhana'}


class ReportDataError(ValueError):
    """Raised with every missing field of a report payload at once."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__(f"Invalid report data: {', '.join(self.errors)}")


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_report_data(data):
    errors = []

    title = data.get('title')
    if not title or not isinstance(title, str):
        errors.append('title is required')

    date_range = data.get('date_range') or {}
    if not date_range.get('from') or not date_range.get('to'):
        errors.append('date_range with from and to is required')

    stats = data.get('summary_stats')
    if not stats:
        errors.append('summary_stats is required')
    else:
        for name in STATS_FIELDS:
            if not _is_number(stats.get(name)):
                errors.append(f"summary_stats.{name} is required")

    if not isinstance(data.get('lecturer_scores'), list):
        errors.append('lecturer_scores list is required')
    if not isinstance(data.get('evaluations'), list):
        errors.append('evaluations list is required')

    return {'valid': not errors, 'errors': errors}


class NumberedCanvas(canvas.Canvas):
    """Defers page output until the end so each footer can print the page total."""

    def __init__(self, *args, generated_on='', **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []
        self._generated_on = generated_on

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self.draw_footer(total)
            super().showPage()
        super().save()

    def draw_footer(self, total):
        self.setFont('Helvetica', 8)
        self.drawCentredString(
            A4[0] / 2, 12 * mm,
            f"Dijana pada: {self._generated_on} | Halaman {self._pageNumber} / {total}"
        )


class ReportBuilder:
    def __init__(self):
        self.styles = getSampleStyleSheet()
        self.styles.add(ParagraphStyle(
            name='Mosque', parent=self.styles['Title'], fontSize=16, spaceAfter=4, alignment=TA_CENTER,
        ))
        self.styles.add(ParagraphStyle(
            name='ReportTitle', parent=self.styles['Heading2'], fontSize=14, alignment=TA_CENTER, spaceAfter=2,
        ))
        self.styles.add(ParagraphStyle(
            name='Period', parent=self.styles['Normal'], fontSize=10, alignment=TA_CENTER, spaceAfter=10,
        ))
        self.styles.add(ParagraphStyle(name='Section', parent=self.styles['Heading3'], fontSize=11))
        self.styles.add(ParagraphStyle(name='Cell', parent=self.styles['Normal'], fontSize=9))
        self.styles.add(ParagraphStyle(name='Small', parent=self.styles['Normal'], fontSize=8))
        self.styles.add(ParagraphStyle(
            name='More', parent=self.styles['Normal'], fontSize=8, fontName='Helvetica-Oblique',
        ))

    def _p(self, text, style='Cell'):
        return Paragraph(escape(str(text)), self.styles[style])

    def _header(self, data):
        return [
            self._p(settings.MOSQUE_NAME, 'Mosque'),
            self._p(data['title'], 'ReportTitle'),
            self._p(f"Tempoh: {data['date_range']['from']} - {data['date_range']['to']}", 'Period'),
        ]

    def _summary(self, data):
        stats = data['summary_stats']
        yes, no = stats['recommendation_yes'], stats['recommendation_no']
        total = yes + no
        yes_percent = to_fixed(yes / total * 100, 1) if total else '0'
        no_percent = to_fixed(no / total * 100, 1) if total else '0'

        rows = [
            [self._p('Ringkasan Eksekutif', 'Section'), ''],
            [self._p(f"Jumlah Penilaian: {stats['total_evaluations']}"),
             self._p(f"Purata Skor: {to_fixed(stats['average_score'])}/4.00")],
            [self._p(f"Cadangan Ya: {yes} ({yes_percent}%)"),
             self._p(f"Cadangan Tidak: {no} ({no_percent}%)")],
        ]

        change = (data.get('comparison') or {}).get('change_percent')
        if change:
            rows.append([self._p(f"Perubahan Skor: {signed(change['score'], 1, '%')} berbanding tempoh sebelum"), ''])

        insights = data.get('insights')
        if insights and (insights.top_performer or insights.needs_attention):
            top, attention = insights.top_performer, insights.needs_attention
            rows.append([
                self._p(f"Prestasi Terbaik: {top.name} ({to_fixed(top.score)})") if top else '',
                self._p(f"Perlu Perhatian: {attention.name} ({to_fixed(attention.score)})") if attention else '',
            ])

        table = Table(rows, colWidths=[91 * mm, 91 * mm])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, -1), SUMMARY_FILL),
            ('SPAN', (0, 0), (-1, 0)),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ]))
        return [table, Spacer(1, 6 * mm)]

    def _insights(self, insights):
        if not insights or not (insights.key_findings or insights.recommendations):
            return []
        rows = [[self._p('Penemuan & Cadangan', 'Section')]]
        for finding in insights.key_findings[:2]:
            rows.append([self._p(f"• {finding}")])
        if insights.recommendations:
            rows.append([Paragraph('<b>Cadangan:</b>', self.styles['Cell'])])
            for i, recommendation in enumerate(insights.recommendations[:2], start=1):
                rows.append([self._p(f"{i}. {recommendation}")])
        table = Table(rows, colWidths=[182 * mm])
        table.setStyle(TableStyle([('BACKGROUND', (0, 0), (-1, -1), INSIGHT_FILL)]))
        return [table, Spacer(1, 6 * mm)]

    def _table_style(self, font_size):
        return [
            ('BACKGROUND', (0, 0), (-1, 0), GREEN),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), font_size),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, HexColor('#f5f5f5')]),
            ('ALIGN', (1, 0), (-1, -1), 'CENTER'),
        ]

    def _lecturer_table(self, scores):
        if not scores:
            return []
        rows = [['Penceramah', 'Q1', 'Q2', 'Q3', 'Q4', 'Purata', 'Bil.', 'Status']]
        style = self._table_style(9)
        for index, s in enumerate(scores, start=1):
            rows.append([
                self._p(s.lecturer_name),
                to_fixed(s.avg_q1), to_fixed(s.avg_q2), to_fixed(s.avg_q3), to_fixed(s.avg_q4),
                to_fixed(s.avg_overall),
                str(s.total_evaluations),
                STATUS_LABELS.get(s.risk_level, 'Baik'),
            ])
            # low and excellent overall scores stand out
            if s.avg_overall < LOW:
                style += [('TEXTCOLOR', (5, index), (5, index), RED),
                          ('FONTNAME', (5, index), (5, index), 'Helvetica-Bold')]
            elif s.avg_overall >= EXCELLENT:
                style += [('TEXTCOLOR', (5, index), (5, index), GREEN),
                          ('FONTNAME', (5, index), (5, index), 'Helvetica-Bold')]
        widths = [w * mm for w in (40, 16, 16, 16, 16, 18, 14, 28)]
        table = Table(rows, colWidths=widths, repeatRows=1)
        table.setStyle(TableStyle(style))
        return [self._p('Skor Penceramah', 'Section'), table, Spacer(1, 6 * mm)]

    def _evaluation_table(self, evaluations):
        if not evaluations:
            return []
        rows = [['Penilai', 'Penceramah', 'Tarikh', 'Minggu', 'Jenis', 'Skor', 'Cadangan']]
        for e in evaluations[:MAX_EVALUATION_ROWS]:
            rows.append([
                self._p(e.evaluator_name[:15], 'Small'),
                self._p((e.lecturer_name or 'Unknown')[:15], 'Small'),
                e.evaluation_date,
                f"M{e.week}" if e.week else '-',
                e.lecture_type or '-',
                to_fixed(e.score),
                'Ya' if e.recommend_continue else 'Tidak',
            ])
        widths = [w * mm for w in (30, 30, 22, 15, 26, 18, 20)]
        table = Table(rows, colWidths=widths, repeatRows=1)
        table.setStyle(TableStyle(self._table_style(8)))
        flowables = [self._p('Senarai Penilaian', 'Section'), table]
        if len(evaluations) > MAX_EVALUATION_ROWS:
            flowables.append(Spacer(1, 2 * mm))
            flowables.append(self._p(f"... dan {len(evaluations) - MAX_EVALUATION_ROWS} lagi rekod", 'More'))
        return flowables

    def build(self, data, generated_on):
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=14 * mm,
            rightMargin=14 * mm,
            topMargin=15 * mm,
            bottomMargin=20 * mm,
            title=data['title'],
            invariant=True,
        )
        story = []
        story.extend(self._header(data))
        story.extend(self._summary(data))
        story.extend(self._insights(data.get('insights')))
        story.extend(self._lecturer_table(data['lecturer_scores']))
        story.extend(self._evaluation_table(data['evaluations']))

        doc.build(story, canvasmaker=lambda *args, **kwargs: NumberedCanvas(
            *args, generated_on=generated_on, **kwargs
        ))
        return buffer.getvalue()


def generate_pdf_report(data, generated_on):
    """
    Render the report and return the PDF bytes.

    `generated_on` is the date text printed in every page footer.
    Raises ReportDataError listing every missing field when the payload is incomplete.
    """
    validation = validate_report_data(data)
    if not validation['valid']:
        raise ReportDataError(validation['errors'])
    pdf = ReportBuilder().build(data, generated_on)
    logger.info(f"Generated PDF report '{data['title']}' ({len(pdf)} bytes)")
    return pdf
