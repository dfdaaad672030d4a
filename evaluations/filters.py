import django_filters

from lectures.models import LectureSession
from .models import Evaluation


class EvaluationFilter(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name='evaluation_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='evaluation_date', lookup_expr='lte')
    lecturer = django_filters.NumberFilter(field_name='lecturer_id')
    week = django_filters.NumberFilter(field_name='session__week')
    lecture_type = django_filters.ChoiceFilter(
        field_name='session__lecture_type', choices=LectureSession.LECTURE_TYPE_CHOICES
    )

    class Meta:
        model = Evaluation
        fields = ['date_from', 'date_to', 'lecturer', 'week', 'lecture_type']
