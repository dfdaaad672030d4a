from django.db import models


class SiteSetting(models.Model):
    """Admin-editable runtime setting stored as a JSON value under a unique key."""

    EMAIL_NOTIFICATIONS_ENABLED = 'email_notifications_enabled'
    ADMIN_EMAILS = 'admin_emails'
    ALERT_THRESHOLD = 'alert_threshold'
    SHOW_RECOMMENDATION_SECTION = 'show_recommendation_section'

    KEY_CHOICES = (
        (EMAIL_NOTIFICATIONS_ENABLED, 'Email Notifications Enabled'),
        (ADMIN_EMAILS, 'Admin Emails'),
        (ALERT_THRESHOLD, 'Alert Threshold'),
        (SHOW_RECOMMENDATION_SECTION, 'Show Recommendation Section'),
    )

    key = models.CharField(max_length=100, unique=True, choices=KEY_CHOICES)
    value = models.JSONField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['key']

    def __str__(self):
        return f"{self.key} = {self.value!r}"

    @classmethod
    def as_dict(cls):
        return dict(cls.objects.values_list('key', 'value'))

    @classmethod
    def put(cls, key, value):
        setting, _ = cls.objects.update_or_create(key=key, defaults={'value': value})
        return setting
