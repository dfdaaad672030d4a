import logging
from dataclasses import asdict

from django.conf import settings
from django_rq import job

from .notifications import EmailConfig, EvaluationSummary, send_notification_safe

logger = logging.getLogger(__name__)


@job('default')
def send_evaluation_notification_task(summary_data, config_data):
    """
    rq job: rebuilds the summary/config from plain dicts and sends safely.
    Usage: enqueue through dispatch_evaluation_notifications().
    """
    send_notification_safe(EvaluationSummary(**summary_data), EmailConfig(**config_data))
    return f"Notification processed for {summary_data.get('lecturer_name')}"


def dispatch_evaluation_notifications(summaries, config):
    """
    Fire-and-forget notification for each stored evaluation.

    Never raises: a missing queue or broken broker is logged and ignored so the
    submission response is unaffected.
    """
    if not config.is_enabled:
        return
    for summary in summaries:
        try:
            if settings.EVALUATION_NOTIFICATIONS_ASYNC:
                send_evaluation_notification_task.delay(asdict(summary), asdict(config))
            else:
                send_notification_safe(summary, config)
        except Exception as e:
            logger.error(f"Could not dispatch evaluation notification (non-blocking): {e}")
