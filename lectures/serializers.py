from rest_framework import serializers

from .models import Lecturer, LectureSession
from .schedule import format_lecturer_card_data


class LecturerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Lecturer
        fields = ('id', 'name', 'image', 'description', 'sort_order', 'created_at', 'updated_at')
        read_only_fields = ('created_at', 'updated_at')

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Nama penceramah diperlukan')
        return value

    def validate_description(self, value):
        if value is None:
            return None
        return value.strip() or None

    def update(self, instance, validated_data):
        new_image = validated_data.get('image')
        if new_image and instance.image:
            instance.image.delete(save=False)
        return super().update(instance, validated_data)


class LecturerBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Lecturer
        fields = ('id', 'name', 'image')


class LectureSessionSerializer(serializers.ModelSerializer):
    lecturer_name = serializers.ReadOnlyField(source='lecturer.name')
    is_recurring = serializers.ReadOnlyField()

    class Meta:
        model = LectureSession
        fields = (
            'id', 'month', 'year', 'week', 'day', 'lecture_type', 'is_active',
            'lecturer', 'lecturer_name', 'is_recurring', 'created_at'
        )
        read_only_fields = ('created_at',)
        # Duplicates are reported with a single message in validate()
        validators = []

    def validate(self, data):
        instance = self.instance
        key = {
            field: data.get(field, getattr(instance, field, 0) if instance else 0)
            for field in ('month', 'year')
        }
        for field in ('week', 'day', 'lecture_type'):
            key[field] = data.get(field, getattr(instance, field, None))

        duplicates = LectureSession.objects.filter(**key)
        if instance is not None:
            duplicates = duplicates.exclude(pk=instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError('Sesi ini sudah wujud')
        return data


class PublicSessionSerializer(serializers.ModelSerializer):
    lecturer = LecturerBriefSerializer(read_only=True)
    card = serializers.SerializerMethodField()

    class Meta:
        model = LectureSession
        fields = ('id', 'week', 'day', 'lecture_type', 'lecturer', 'card')

    def get_card(self, obj):
        return format_lecturer_card_data(obj, self.context.get('request'))
