from rest_framework import serializers

from core.validators import RATING_FIELDS, is_ratings_complete
from lectures.models import Lecturer, LectureSession
from .models import Evaluation


def _clean_text(value):
    if value is None:
        return None
    return value.strip() or None


class EvaluatorInfoSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    age = serializers.IntegerField(min_value=1, max_value=150)
    address = serializers.CharField()
    date = serializers.DateField(input_formats=['%Y-%m-%d'])


class LecturerEvaluationSerializer(serializers.Serializer):
    session_id = serializers.PrimaryKeyRelatedField(
        queryset=LectureSession.objects.all(), source='session', required=False, allow_null=True
    )
    lecturer_id = serializers.PrimaryKeyRelatedField(
        queryset=Lecturer.objects.all(), source='lecturer', required=False, allow_null=True
    )
    ratings = serializers.DictField(required=False, default=dict)
    recommendation = serializers.BooleanField(required=False, allow_null=True, default=None)


class EvaluationSubmissionSerializer(serializers.Serializer):
    """
    Public form payload: one evaluator block and one entry per lecturer rated.

    Only entries whose four answers are all integers from 1 to 4 are stored.
    The caller passes ``show_recommendation_section`` in the context; when it
    is off the recommendation is stored as null.
    """
    evaluator = EvaluatorInfoSerializer()
    evaluations = LecturerEvaluationSerializer(many=True)
    lecturer_comment = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    mosque_suggestion = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)

    @property
    def complete_evaluations(self):
        return [e for e in self.validated_data['evaluations'] if is_ratings_complete(e['ratings'])]

    def create(self, validated_data):
        evaluator = validated_data['evaluator']
        keep_recommendation = self.context.get('show_recommendation_section', True)
        comment = _clean_text(validated_data.get('lecturer_comment'))
        suggestion = _clean_text(validated_data.get('mosque_suggestion'))

        created = []
        for item in self.complete_evaluations:
            ratings = {name: item['ratings'][name] for name in RATING_FIELDS}
            created.append(Evaluation.objects.create(
                session=item.get('session'),
                lecturer=item.get('lecturer'),
                evaluator_name=evaluator['name'].strip(),
                age=evaluator['age'],
                address=evaluator['address'].strip(),
                evaluation_date=evaluator['date'],
                recommend_continue=item.get('recommendation') if keep_recommendation else None,
                lecturer_comment=comment,
                mosque_suggestion=suggestion,
                **ratings
            ))
        return created


class EvaluationSerializer(serializers.ModelSerializer):
    lecturer_name = serializers.ReadOnlyField(source='lecturer.name')
    week = serializers.ReadOnlyField(source='session.week')
    day = serializers.ReadOnlyField(source='session.day')
    lecture_type = serializers.ReadOnlyField(source='session.lecture_type')
    score = serializers.ReadOnlyField()

    class Meta:
        model = Evaluation
        fields = (
            'id', 'session', 'lecturer', 'lecturer_name', 'week', 'day', 'lecture_type',
            'evaluator_name', 'age', 'address', 'evaluation_date',
            'q1_topic', 'q2_knowledge', 'q3_delivery', 'q4_time', 'score',
            'recommend_continue', 'lecturer_comment', 'mosque_suggestion', 'created_at'
        )
        read_only_fields = fields


class ClearCommentSerializer(serializers.Serializer):
    evaluator_name = serializers.CharField(trim_whitespace=False)
    date = serializers.DateField()
    text = serializers.CharField(trim_whitespace=False)


class RatingDraftSerializer(serializers.Serializer):
    q1_topic = serializers.IntegerField(required=False, allow_null=True, min_value=1, max_value=4, default=None)
    q2_knowledge = serializers.IntegerField(required=False, allow_null=True, min_value=1, max_value=4, default=None)
    q3_delivery = serializers.IntegerField(required=False, allow_null=True, min_value=1, max_value=4, default=None)
    q4_time = serializers.IntegerField(required=False, allow_null=True, min_value=1, max_value=4, default=None)
    recommendation = serializers.BooleanField(required=False, allow_null=True, default=None)


class DraftSerializer(serializers.Serializer):
    evaluator_info = serializers.DictField(required=False, default=dict)
    selected_lecturers = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    ratings = serializers.DictField(child=RatingDraftSerializer(), required=False, default=dict)
    lecturer_comment = serializers.CharField(required=False, allow_blank=True, default='')
    mosque_suggestion = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_evaluator_info(self, value):
        allowed = ('name', 'age', 'address', 'date')
        unknown = sorted(set(value) - set(allowed))
        if unknown:
            raise serializers.ValidationError(f"Medan tidak dikenali: {', '.join(unknown)}")
        return {key: value.get(key, '') for key in allowed}
