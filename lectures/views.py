import logging

from django.db.models import Q
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, OpenApiResponse
from rest_framework import viewsets, status, filters
from rest_framework.decorators import action
from rest_framework.parsers import JSONParser, MultiPartParser, FormParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core.permissions import IsAdminUser
from core.services import load_site_config
from core.utils import local_today
from .models import Lecturer, LectureSession
from .schedule import group_sessions_by_week, sessions_by_week_for_admin, has_required_lecturer_info
from .serializers import LecturerSerializer, LectureSessionSerializer, PublicSessionSerializer

logger = logging.getLogger(__name__)


class LecturerViewSet(viewsets.ModelViewSet):
    """
    Admin management of lecturers.
    Deleting a lecturer removes its photo and leaves its evaluations and sessions unassigned.
    """
    queryset = Lecturer.objects.all()
    serializer_class = LecturerSerializer
    permission_classes = [IsAdminUser]
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name']
    ordering_fields = ['sort_order', 'name', 'created_at']

    def perform_destroy(self, instance):
        logger.info(f"Deleting lecturer {instance.id} ({instance.name})")
        instance.delete()


class LectureSessionViewSet(viewsets.ModelViewSet):
    queryset = LectureSession.objects.select_related('lecturer')
    serializer_class = LectureSessionSerializer
    permission_classes = [IsAdminUser]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['month', 'year', 'week', 'day', 'lecture_type', 'is_active', 'lecturer']

    @extend_schema(
        responses={
            201: LectureSessionSerializer,
            400: OpenApiResponse(description="Sesi ini sudah wujud, or missing fields."),
        },
        summary="Create a recurring session (month and year default to 0)"
    )
    def create(self, request, *args, **kwargs):
        return super().create(request, *args, **kwargs)

    @extend_schema(summary="Sessions grouped into weeks 1-5 in timetable order")
    @action(detail=False, methods=['get'])
    def by_week(self, request):
        sessions = self.filter_queryset(self.get_queryset())
        grouped = sessions_by_week_for_admin(sessions)
        return Response({
            str(week): LectureSessionSerializer(items, many=True).data
            for week, items in grouped.items()
        })

    @extend_schema(request=None, responses={200: LectureSessionSerializer}, summary="Flip the active flag")
    @action(detail=True, methods=['post'])
    def toggle_active(self, request, pk=None):
        session = self.get_object()
        session.is_active = not session.is_active
        session.save(update_fields=['is_active'])
        return Response(self.get_serializer(session).data, status=status.HTTP_200_OK)


class ScheduleView(APIView):
    """Public schedule behind the evaluation form."""
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(summary="Active sessions for this month grouped by week")
    def get(self, request):
        today = local_today()
        sessions = (
            LectureSession.objects
            .select_related('lecturer')
            .filter(is_active=True)
            .filter(Q(month=today.month, year=today.year) | Q(month=0, year=0))
        )
        sessions = [s for s in sessions if has_required_lecturer_info(s)]
        grouped = group_sessions_by_week(sessions)
        context = {'request': request}

        return Response({
            'sessions_by_week': {
                str(week): {
                    'sessions': PublicSessionSerializer(data['sessions'], many=True, context=context).data,
                    'lecturer_ids': sorted(data['lecturers']),
                }
                for week, data in grouped.items()
            },
            'current_month': today.month,
            'current_year': today.year,
            'today': today.isoformat(),
            'show_recommendation_section': load_site_config().show_recommendation_section,
        })
