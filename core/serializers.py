from rest_framework import serializers

from .notifications import is_valid_email

THRESHOLD_ERROR = 'Nilai threshold tidak sah (mesti antara 1.0 dan 4.0)'


class EmailListField(serializers.Field):
    """Accepts a list of addresses or a single comma-separated string."""

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = data.split(',')
        if not isinstance(data, (list, tuple)):
            raise serializers.ValidationError('Senarai email tidak sah')
        emails = [str(e).strip() for e in data if str(e).strip()]
        invalid = [e for e in emails if not is_valid_email(e)]
        if invalid:
            raise serializers.ValidationError(f"Email tidak sah: {', '.join(invalid)}")
        return emails

    def to_representation(self, value):
        return list(value)


class SiteConfigSerializer(serializers.Serializer):
    email_notifications_enabled = serializers.BooleanField(required=False)
    admin_emails = EmailListField(required=False)
    alert_threshold = serializers.FloatField(
        required=False,
        min_value=1.0,
        max_value=4.0,
        error_messages={
            'invalid': THRESHOLD_ERROR,
            'min_value': THRESHOLD_ERROR,
            'max_value': THRESHOLD_ERROR,
        },
    )
    show_recommendation_section = serializers.BooleanField(required=False)


class QRCodeResponseSerializer(serializers.Serializer):
    form_url = serializers.CharField()
    qr_code_data_url = serializers.CharField(allow_blank=True)
    error_message = serializers.CharField(allow_blank=True)
