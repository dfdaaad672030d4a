"""
Email notifications sent to administrators when a new evaluation arrives.

The configuration is passed in explicitly by the caller (see
`core.services.SiteConfig.email_config`). Sending never blocks the
evaluation submission: `send_notification_safe` swallows every failure.
"""
import logging
from dataclasses import dataclass, field

from django.core.exceptions import ValidationError
from django.core.mail import EmailMultiAlternatives
from django.core.validators import validate_email
from django.template.loader import render_to_string

from .utils import to_fixed

logger = logging.getLogger(__name__)


@dataclass
class EmailConfig:
    enabled: bool = False
    admin_emails: list = field(default_factory=list)
    from_email: str = 'noreply@masjid-almuttaqin.com'
    from_name: str = 'Sistem Penilaian Kuliah'

    @property
    def is_enabled(self):
        return self.enabled and len(self.admin_emails) > 0

    @property
    def sender(self):
        return f"{self.from_name} <{self.from_email}>"


@dataclass
class EvaluationSummary:
    evaluator_name: str
    lecturer_name: str
    date: str
    overall_rating: float
    # None when the recommendation question was not asked.
    recommendation: bool = None


@dataclass
class EmailContent:
    subject: str
    body: str
    html: str


@dataclass
class EmailResult:
    success: bool
    error: str = None


def recommendation_label(recommendation):
    if recommendation is None:
        return '-', 'none'
    return ('Ya', 'yes') if recommendation else ('Tidak', 'no')


def format_email_content(summary):
    subject = f"Penilaian Baru: {summary.lecturer_name} - {summary.date}"
    recommendation, recommendation_class = recommendation_label(summary.recommendation)

    body = '\n'.join([
        'Penilaian Baru Diterima',
        '',
        'Maklumat Penilaian:',
        f"- Penilai: {summary.evaluator_name}",
        f"- Penceramah: {summary.lecturer_name}",
        f"- Tarikh: {summary.date}",
        f"- Purata Skor: {to_fixed(summary.overall_rating)}/4.00",
        f"- Cadangan Diteruskan: {recommendation}",
        '',
        '---',
        'Sistem Penilaian Kuliah',
        'Masjid Al-Muttaqin Wangsa Melawati',
    ])

    # Autoescaping in the template covers & < > " ' in the user-supplied fields.
    html = render_to_string('core/emails/evaluation_notification.html', {
        'summary': summary,
        'overall_rating': to_fixed(summary.overall_rating),
        'recommendation_label': recommendation,
        'recommendation_class': recommendation_class,
    }).strip()

    return EmailContent(subject=subject, body=body, html=html)


def is_valid_email(email):
    if not email or not isinstance(email, str):
        return False
    try:
        validate_email(email)
    except ValidationError:
        return False
    return True


def validate_evaluation_summary(summary):
    errors = []

    if not summary.evaluator_name:
        errors.append('evaluatorName is required')
    if not summary.lecturer_name:
        errors.append('lecturerName is required')
    if not summary.date:
        errors.append('date is required')
    rating = summary.overall_rating
    if isinstance(rating, bool) or not isinstance(rating, (int, float)) or not 1 <= rating <= 4:
        errors.append('overallRating must be a number between 1 and 4')
    if summary.recommendation is not None and not isinstance(summary.recommendation, bool):
        errors.append('recommendation must be a boolean or empty')

    return {'valid': not errors, 'errors': errors}


def send_evaluation_notification(summary, config):
    validation = validate_evaluation_summary(summary)
    if not validation['valid']:
        return EmailResult(success=False, error=f"Invalid summary: {', '.join(validation['errors'])}")

    # Disabled notifications count as success; nothing is sent.
    if not config.is_enabled:
        return EmailResult(success=True)

    content = format_email_content(summary)
    try:
        message = EmailMultiAlternatives(
            subject=content.subject,
            body=content.body,
            from_email=config.sender,
            to=config.admin_emails,
        )
        message.attach_alternative(content.html, 'text/html')
        message.send(fail_silently=False)
        logger.info(f"Sent evaluation notification to {len(config.admin_emails)} admin(s): {content.subject}")
        return EmailResult(success=True)
    except Exception as e:
        logger.error(f"Failed to send evaluation notification: {e}")
        return EmailResult(success=False, error=str(e))


def send_notification_safe(summary, config):
    """Send a notification, logging instead of raising on any failure."""
    try:
        result = send_evaluation_notification(summary, config)
        if not result.success and result.error:
            logger.error(f"Notification failed (non-blocking): {result.error}")
    except Exception as e:
        logger.error(f"Unexpected notification error (non-blocking): {e}", exc_info=True)
