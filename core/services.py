import logging
from dataclasses import dataclass, field

from django.conf import settings

from .models import SiteSetting

logger = logging.getLogger(__name__)

DEFAULT_ALERT_THRESHOLD = 2.0


@dataclass
class SiteConfig:
    email_notifications_enabled: bool = False
    admin_emails: list = field(default_factory=list)
    alert_threshold: float = DEFAULT_ALERT_THRESHOLD
    show_recommendation_section: bool = True

    def email_config(self):
        from .notifications import EmailConfig

        return EmailConfig(
            enabled=self.email_notifications_enabled,
            admin_emails=list(self.admin_emails),
            from_email=settings.NOTIFICATION_FROM_EMAIL,
            from_name=settings.NOTIFICATION_FROM_NAME,
        )


def _parse_threshold(raw):
    try:
        return float(raw)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid alert_threshold setting: {raw!r}")
        return DEFAULT_ALERT_THRESHOLD


def load_site_config():
    """Read the stored site settings, falling back to defaults for missing keys."""
    stored = SiteSetting.as_dict()
    admin_emails = stored.get(SiteSetting.ADMIN_EMAILS) or []
    threshold = stored.get(SiteSetting.ALERT_THRESHOLD)
    return SiteConfig(
        email_notifications_enabled=stored.get(SiteSetting.EMAIL_NOTIFICATIONS_ENABLED) is True,
        admin_emails=[e for e in admin_emails if isinstance(e, str)],
        alert_threshold=DEFAULT_ALERT_THRESHOLD if threshold is None else _parse_threshold(threshold),
        show_recommendation_section=stored.get(SiteSetting.SHOW_RECOMMENDATION_SECTION) is not False,
    )


def save_site_config(**changes):
    for key, value in changes.items():
        SiteSetting.put(key, value)
    return load_site_config()
