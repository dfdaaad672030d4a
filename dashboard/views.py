import logging
from dataclasses import asdict

from django.db.models import Q
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, OpenApiParameter
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response

from analytics.alerts import get_low_score_alerts, get_alert_severity, format_alert_message
from analytics.comparison import (
    calculate_lecturer_comparison, get_comparison_labels, get_comparison_values, get_comparison_colors,
)
from analytics.records import records_from_queryset
from analytics.trend import (
    month_slots, calculate_monthly_trend, get_trend_labels, get_trend_values, get_trend_direction,
    validate_trend_data,
)
from core.permissions import IsAdminUser
from core.services import load_site_config
from core.utils import local_today, month_bounds, month_name, parse_int
from evaluations.models import Evaluation
from lectures.models import Lecturer, LectureSession

logger = logging.getLogger(__name__)

RECENT_COMMENTS = 10
MAX_TREND_MONTHS = 24


def rank_lecturers(evaluations):
    """
    (top, lowest) lecturer by the mean of their per-evaluation scores, or
    (None, None) when nothing was rated. Ties go to the lecturer seen first.
    """
    groups = {}
    for e in evaluations:
        if not e.lecturer_id or not e.lecturer_name:
            continue
        group = groups.setdefault(e.lecturer_id, {'name': e.lecturer_name, 'total': 0, 'count': 0})
        group['total'] += e.score
        group['count'] += 1

    top = lowest = None
    for group in groups.values():
        entry = {'name': group['name'], 'avg_score': group['total'] / group['count']}
        if top is None or entry['avg_score'] > top['avg_score']:
            top = entry
        if lowest is None or entry['avg_score'] < lowest['avg_score']:
            lowest = entry
    return top, lowest


def recent_comments(start, end):
    rows = (
        Evaluation.objects
        .filter(evaluation_date__gte=start, evaluation_date__lt=end)
        .filter(Q(lecturer_comment__gt='') | Q(mosque_suggestion__gt=''))
        .select_related('lecturer')
        .order_by('-evaluation_date', '-created_at')[:RECENT_COMMENTS]
    )
    return [
        {
            'id': row.id,
            'evaluator_name': row.evaluator_name,
            'date': row.evaluation_date.isoformat(),
            'lecturer_name': row.lecturer.name if row.lecturer else None,
            'lecturer_comment': row.lecturer_comment,
            'mosque_suggestion': row.mosque_suggestion,
        }
        for row in rows
    ]


def serialize_alert(alert):
    data = asdict(alert)
    data['severity'] = get_alert_severity(alert.average_score)
    data['message'] = format_alert_message(alert)
    return data


class DashboardViewSet(viewsets.ViewSet):
    """
    Admin dashboard: KPIs for the current month, the monthly score trend and
    a side-by-side lecturer comparison.
    """
    permission_classes = [IsAdminUser]

    @extend_schema(summary="Dashboard KPIs for the current month")
    def list(self, request):
        today = local_today()
        start, end = month_bounds(today.year, today.month)
        evaluations = records_from_queryset(
            Evaluation.objects.filter(evaluation_date__gte=start, evaluation_date__lt=end)
        )
        threshold = load_site_config().alert_threshold
        top, lowest = rank_lecturers(evaluations)

        return Response({
            'total_evaluations': len(evaluations),
            'total_lecturers': Lecturer.objects.count(),
            'total_sessions': LectureSession.objects.filter(month=today.month, year=today.year).count(),
            'top_lecturer': top,
            'lowest_lecturer': lowest,
            'recent_comments': recent_comments(start, end),
            'alerts': [serialize_alert(a) for a in get_low_score_alerts(evaluations, threshold)],
            'alert_threshold': threshold,
            'month_name': month_name(today.month),
            'year': today.year,
        })

    @extend_schema(
        summary="Monthly average score trend",
        parameters=[
            OpenApiParameter(name='months', type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, default=6),
            OpenApiParameter(name='lecturer', type=OpenApiTypes.INT, location=OpenApiParameter.QUERY),
        ],
    )
    @action(detail=False, methods=['get'])
    def trend(self, request):
        months = min(max(parse_int(request.query_params.get('months'), 6), 1), MAX_TREND_MONTHS)
        lecturer_id = parse_int(request.query_params.get('lecturer'), None)
        today = local_today()

        first_year, first_month = month_slots(months, today)[0]
        queryset = Evaluation.objects.filter(evaluation_date__gte=month_bounds(first_year, first_month)[0])
        points = calculate_monthly_trend(records_from_queryset(queryset), months, lecturer_id, today=today)

        return Response({
            'points': [asdict(p) for p in points],
            'labels': get_trend_labels(points),
            'values': get_trend_values(points),
            'direction': get_trend_direction(points),
            'is_valid': validate_trend_data(points),
        })

    @extend_schema(
        summary="Compare selected lecturers question by question",
        parameters=[
            OpenApiParameter(name='lecturers', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY,
                             description='Comma-separated lecturer ids, e.g. "1,4"'),
            OpenApiParameter(name='month', type=OpenApiTypes.INT, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='year', type=OpenApiTypes.INT, location=OpenApiParameter.QUERY),
        ],
    )
    @action(detail=False, methods=['get'])
    def comparison(self, request):
        raw_ids = (request.query_params.get('lecturers') or '').split(',')
        selected_ids = [i for i in (parse_int(r, None) for r in raw_ids) if i is not None]
        month = parse_int(request.query_params.get('month'), None)
        year = parse_int(request.query_params.get('year'), None)
        if month is not None and not 1 <= month <= 12:
            return Response({'error': 'Bulan tidak sah'}, status=status.HTTP_400_BAD_REQUEST)

        lecturers = list(Lecturer.objects.order_by('name').values('id', 'name'))
        comparisons = []
        if selected_ids:
            queryset = Evaluation.objects.all()
            if month and year:
                start, end = month_bounds(year, month)
                queryset = queryset.filter(evaluation_date__gte=start, evaluation_date__lt=end)
            names = {l['id']: l['name'] for l in lecturers}
            comparisons = calculate_lecturer_comparison(records_from_queryset(queryset), names, selected_ids)

        colors = get_comparison_colors(len(comparisons))
        return Response({
            'lecturers': lecturers,
            'selected_ids': selected_ids,
            'comparisons': [
                dict(asdict(c), values=get_comparison_values(c), color=color)
                for c, color in zip(comparisons, colors)
            ],
            'labels': get_comparison_labels(),
            'colors': colors,
            'filters': {'month': month, 'year': year},
        })
