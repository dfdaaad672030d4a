import logging
import re

from django.db import transaction
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core.notifications import EvaluationSummary
from core.permissions import IsAdminUser
from core.services import load_site_config
from core.tasks import dispatch_evaluation_notifications
from core.throttles import EvaluationSubmitThrottle
from core.utils import MONTH_NAMES, local_today, month_name, parse_int
from core.validators import validate_evaluator_info
from .comments import comments_for_month, clear_text
from .drafts import (
    save_draft, load_draft, clear_draft, create_empty_draft, format_draft_age, get_draft_age,
)
from .filters import EvaluationFilter
from .models import Evaluation
from .progress import FormState, calculate_progress, get_progress_status, get_progress_color
from .serializers import (
    EvaluationSubmissionSerializer, EvaluationSerializer, ClearCommentSerializer, DraftSerializer,
)

logger = logging.getLogger(__name__)

INCOMPLETE_EVALUATOR = 'Maklumat penilai tidak lengkap'
NO_COMPLETE_EVALUATION = 'Sila lengkapkan sekurang-kurangnya satu penilaian penceramah'
DRAFT_TOKEN_RE = re.compile(r'^[A-Za-z0-9_-]{8,64}$')


def build_summaries(evaluations):
    return [
        EvaluationSummary(
            evaluator_name=e.evaluator_name,
            lecturer_name=e.lecturer.name if e.lecturer else 'Unknown',
            date=e.evaluation_date.isoformat(),
            overall_rating=e.score,
            recommendation=e.recommend_continue,
        )
        for e in evaluations
    ]


class EvaluationSubmitView(APIView):
    """Public submission of the evaluation form."""
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [EvaluationSubmitThrottle]

    @extend_schema(
        request=EvaluationSubmissionSerializer,
        responses={
            201: OpenApiResponse(description="{success, message, count}"),
            400: OpenApiResponse(description="Incomplete evaluator info or no complete rating."),
        },
        summary="Submit evaluations"
    )
    def post(self, request):
        data = request.data if isinstance(request.data, dict) else {}
        evaluator = data.get('evaluator')
        check = validate_evaluator_info(evaluator if isinstance(evaluator, dict) else {})
        if not check.is_valid:
            return Response(
                {'error': INCOMPLETE_EVALUATOR, 'details': check.as_dict()['errors']},
                status=status.HTTP_400_BAD_REQUEST
            )

        config = load_site_config()
        serializer = EvaluationSubmissionSerializer(
            data=request.data,
            context={'show_recommendation_section': config.show_recommendation_section}
        )
        serializer.is_valid(raise_exception=True)
        if not serializer.complete_evaluations:
            return Response({'error': NO_COMPLETE_EVALUATION}, status=status.HTTP_400_BAD_REQUEST)

        email_config = config.email_config()
        with transaction.atomic():
            evaluations = serializer.save()
            summaries = build_summaries(evaluations)
            transaction.on_commit(lambda: dispatch_evaluation_notifications(summaries, email_config))

        logger.info(f"Stored {len(evaluations)} evaluation(s) from {evaluations[0].evaluator_name}")
        return Response(
            {'success': True, 'message': 'Penilaian berjaya dihantar', 'count': len(evaluations)},
            status=status.HTTP_201_CREATED
        )


class EvaluationViewSet(mixins.ListModelMixin,
                        mixins.RetrieveModelMixin,
                        mixins.DestroyModelMixin,
                        viewsets.GenericViewSet):
    """Admin listing of stored evaluations; rows can only be read or deleted."""
    queryset = Evaluation.objects.select_related('lecturer', 'session')
    serializer_class = EvaluationSerializer
    permission_classes = [IsAdminUser]
    filter_backends = [DjangoFilterBackend]
    filterset_class = EvaluationFilter

    def perform_destroy(self, instance):
        logger.info(f"Admin {self.request.user} deleted evaluation {instance.id}")
        instance.delete()


class CommentViewSet(viewsets.ViewSet):
    permission_classes = [IsAdminUser]

    @extend_schema(
        parameters=[
            OpenApiParameter('month', int, description="1-12, defaults to this month"),
            OpenApiParameter('year', int, description="defaults to this year"),
        ],
        summary="Lecturer comments and mosque suggestions for a month"
    )
    def list(self, request):
        today = local_today()
        month = parse_int(request.query_params.get('month'), today.month)
        year = parse_int(request.query_params.get('year'), today.year)
        if not 1 <= month <= 12:
            return Response({'error': 'Bulan tidak sah'}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'lecturer_comments': comments_for_month(year, month, 'lecturer_comment'),
            'mosque_suggestions': comments_for_month(year, month, 'mosque_suggestion'),
            'month': month,
            'year': year,
            'month_name': month_name(month),
            'month_names': MONTH_NAMES,
        })

    def _clear(self, request, field):
        serializer = ClearCommentSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'error': 'Data tidak lengkap', 'details': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )
        data = serializer.validated_data
        cleared = clear_text(field, data['evaluator_name'], data['date'], data['text'])
        logger.info(f"Cleared {field} on {cleared} evaluation(s)")
        return Response({'success': True, 'cleared': cleared})

    @extend_schema(request=ClearCommentSerializer, summary="Remove a lecturer comment from all matching rows")
    @action(detail=False, methods=['post'])
    def clear_comment(self, request):
        return self._clear(request, 'lecturer_comment')

    @extend_schema(request=ClearCommentSerializer, summary="Remove a mosque suggestion from all matching rows")
    @action(detail=False, methods=['post'])
    def clear_suggestion(self, request):
        return self._clear(request, 'mosque_suggestion')


def draft_payload(draft, stored, age_minutes=None):
    progress = calculate_progress(FormState.from_draft(draft))
    return {
        'has_draft': stored,
        'draft': draft,
        'age_minutes': age_minutes,
        'age_label': format_draft_age(age_minutes) if age_minutes is not None else None,
        'progress': progress,
        'status': get_progress_status(progress),
        'color': get_progress_color(progress),
    }


class DraftView(APIView):
    """Public save/restore of an unfinished form, keyed by a client-generated token."""
    permission_classes = [AllowAny]
    authentication_classes = []

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        if not DRAFT_TOKEN_RE.match(kwargs.get('token', '')):
            raise ValidationError({'token': 'Token draf tidak sah'})

    @extend_schema(summary="Load a draft (an empty form when none is stored)")
    def get(self, request, token):
        draft = load_draft(token)
        if draft is None:
            return Response(draft_payload(create_empty_draft(), stored=False))
        return Response(draft_payload(draft, stored=True, age_minutes=get_draft_age(token)))

    @extend_schema(request=DraftSerializer, summary="Save a draft")
    def put(self, request, token):
        serializer = DraftSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        draft = save_draft(token, serializer.data)
        return Response(draft_payload(draft, stored=True, age_minutes=0))

    @extend_schema(summary="Discard a draft")
    def delete(self, request, token):
        clear_draft(token)
        return Response(status=status.HTTP_204_NO_CONTENT)
