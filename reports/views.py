# reports/views.py
import logging
from dataclasses import asdict

from django.http import HttpResponse
from django_filters.utils import translate_validation
from drf_spectacular.utils import extend_schema, OpenApiParameter
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response

from core.permissions import IsAdminUser
from core.utils import local_today
from .exports import (
    generate_csv, generate_lecturer_summary_csv, generate_executive_summary_csv,
    generate_comparison_csv, generate_workbook,
)
from .pdf import ReportDataError, generate_pdf_report
from .services import build_report_context

logger = logging.getLogger(__name__)

CSV_CONTENT_TYPE = 'text/csv; charset=utf-8'
XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

FILTER_PARAMETERS = [
    OpenApiParameter('date_from', str, description="YYYY-MM-DD, inclusive"),
    OpenApiParameter('date_to', str, description="YYYY-MM-DD, inclusive"),
    OpenApiParameter('lecturer', int),
    OpenApiParameter('week', int, description="1-5"),
    OpenApiParameter('lecture_type', str, enum=['Subuh', 'Maghrib', 'Tazkirah Jumaat']),
]


def attachment(content, filename, content_type):
    response = HttpResponse(content, content_type=content_type)
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


def csv_attachment(text, filename):
    # BOM so spreadsheet programs detect UTF-8
    return attachment('\ufeff' + text, filename, CSV_CONTENT_TYPE)


class ReportViewSet(viewsets.ViewSet):
    """
    Admin report screen and its exports. Every endpoint takes the same
    filters as the evaluation listing.
    """
    permission_classes = [IsAdminUser]

    def get_context(self, request):
        context, errors = build_report_context(request.query_params)
        if errors:
            raise translate_validation(errors)
        return context

    def stamp(self):
        return local_today().isoformat()

    @extend_schema(parameters=FILTER_PARAMETERS, summary="Filtered evaluations with lecturer scores and insights")
    def list(self, request):
        context = self.get_context(request)
        analytics = context.analytics()
        return Response({
            'period': context.period,
            'evaluations': [asdict(e) for e in context.evaluations],
            'lecturer_scores': [asdict(s) for s in context.scores],
            'summary': asdict(analytics.summary),
            'insights': asdict(analytics.insights),
            'risk_assessment': [asdict(r) for r in analytics.risk_assessment],
        })

    @extend_schema(parameters=FILTER_PARAMETERS, summary="Raw evaluations as CSV")
    @action(detail=False, methods=['get'])
    def csv(self, request):
        context = self.get_context(request)
        return csv_attachment(generate_csv(context.evaluations), f"penilaian-{self.stamp()}.csv")

    @extend_schema(parameters=FILTER_PARAMETERS, summary="Lecturer summary as CSV")
    @action(detail=False, methods=['get'])
    def lecturer_summary_csv(self, request):
        context = self.get_context(request)
        return csv_attachment(
            generate_lecturer_summary_csv(context.scores), f"ringkasan-penceramah-{self.stamp()}.csv"
        )

    @extend_schema(parameters=FILTER_PARAMETERS, summary="Executive summary as CSV")
    @action(detail=False, methods=['get'])
    def executive_summary_csv(self, request):
        context = self.get_context(request)
        return csv_attachment(
            generate_executive_summary_csv(context.analytics().summary), f"ringkasan-eksekutif-{self.stamp()}.csv"
        )

    @extend_schema(parameters=FILTER_PARAMETERS, summary="Current vs previous period as CSV")
    @action(detail=False, methods=['get'])
    def comparison_csv(self, request):
        context = self.get_context(request)
        if not context.has_previous_period:
            return Response(
                {'error': 'Tarikh mula dan tarikh akhir diperlukan untuk perbandingan'},
                status=status.HTTP_400_BAD_REQUEST
            )
        text = generate_comparison_csv(context.period, context.scores, context.previous_label, context.previous_scores)
        return csv_attachment(text, f"perbandingan-{self.stamp()}.csv")

    @extend_schema(parameters=FILTER_PARAMETERS, summary="Summary and raw evaluations as an Excel workbook")
    @action(detail=False, methods=['get'])
    def xlsx(self, request):
        context = self.get_context(request)
        content = generate_workbook(context.evaluations, context.scores, context.analytics().summary)
        return attachment(content, f"laporan-penilaian-{self.stamp()}.xlsx", XLSX_CONTENT_TYPE)

    @extend_schema(
        parameters=FILTER_PARAMETERS + [OpenApiParameter('title', str)],
        summary="PDF report"
    )
    @action(detail=False, methods=['get'])
    def pdf(self, request):
        context = self.get_context(request)
        payload = context.pdf_payload(title=request.query_params.get('title'))
        try:
            content = generate_pdf_report(payload, generated_on=local_today().strftime('%d/%m/%Y'))
        except ReportDataError as e:
            logger.warning(f"PDF report rejected: {e}")
            return Response({'error': str(e), 'details': e.errors}, status=status.HTTP_400_BAD_REQUEST)
        date_range = payload['date_range']
        return attachment(
            content, f"laporan-penilaian-{date_range['from']}-{date_range['to']}.pdf", 'application/pdf'
        )
