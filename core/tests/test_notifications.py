from unittest import mock

from django.core import mail
from django.test import SimpleTestCase, override_settings

from core.notifications import (
    EmailConfig, EvaluationSummary, format_email_content, is_valid_email,
    send_evaluation_notification, send_notification_safe, validate_evaluation_summary,
)
from core.tasks import dispatch_evaluation_notifications


def summary(**overrides):
    values = {
        'evaluator_name': 'Ahmad',
        'lecturer_name': 'Ustaz Ali',
        'date': '2025-01-06',
        'overall_rating': 3.125,
        'recommendation': True,
    }
    values.update(overrides)
    return EvaluationSummary(**values)


ENABLED = EmailConfig(enabled=True, admin_emails=['admin@example.com', 'imam@example.com'])


class FormatTests(SimpleTestCase):
    def test_plain_body(self):
        content = format_email_content(summary())
        self.assertEqual(content.subject, 'Penilaian Baru: Ustaz Ali - 2025-01-06')
        self.assertIn('- Purata Skor: 3.13/4.00', content.body)
        self.assertIn('- Cadangan Diteruskan: Ya', content.body)
        self.assertTrue(content.body.endswith('Masjid Al-Muttaqin Wangsa Melawati'))

    def test_html_escapes_user_text(self):
        content = format_email_content(summary(evaluator_name='<script>alert("x")</script>'))
        self.assertIn('&lt;script&gt;', content.html)
        self.assertNotIn('<script>', content.html)
        self.assertIn('<script>alert("x")</script>', content.body)

    def test_recommendation_no(self):
        content = format_email_content(summary(recommendation=False))
        self.assertIn('recommendation no', content.html)
        self.assertIn('Cadangan Diteruskan: Tidak', content.body)

    def test_recommendation_not_asked(self):
        content = format_email_content(summary(recommendation=None))
        self.assertIn('- Cadangan Diteruskan: -', content.body)
        self.assertIn('recommendation none', content.html)
        self.assertNotIn('Tidak', content.body)


class ValidationTests(SimpleTestCase):
    def test_valid_summary(self):
        self.assertEqual(validate_evaluation_summary(summary()), {'valid': True, 'errors': []})

    def test_missing_recommendation_is_valid(self):
        self.assertTrue(validate_evaluation_summary(summary(recommendation=None))['valid'])

    def test_invalid_summary(self):
        result = validate_evaluation_summary(summary(evaluator_name='', overall_rating=5, recommendation='ya'))
        self.assertFalse(result['valid'])
        self.assertEqual(result['errors'], [
            'evaluatorName is required',
            'overallRating must be a number between 1 and 4',
            'recommendation must be a boolean or empty',
        ])

    def test_is_valid_email(self):
        self.assertTrue(is_valid_email('admin@example.com'))
        self.assertFalse(is_valid_email('admin@'))
        self.assertFalse(is_valid_email(''))
        self.assertFalse(is_valid_email(None))

    def test_config_enabled_needs_recipients(self):
        self.assertFalse(EmailConfig(enabled=True).is_enabled)
        self.assertFalse(EmailConfig(enabled=False, admin_emails=['a@example.com']).is_enabled)
        self.assertTrue(ENABLED.is_enabled)


class SendTests(SimpleTestCase):
    def test_sends_multipart_message(self):
        result = send_evaluation_notification(summary(), ENABLED)
        self.assertTrue(result.success)
        self.assertEqual(len(mail.outbox), 1)
        message = mail.outbox[0]
        self.assertEqual(message.to, ['admin@example.com', 'imam@example.com'])
        self.assertEqual(message.from_email, 'Sistem Penilaian Kuliah <noreply@masjid-almuttaqin.com>')
        self.assertEqual(message.alternatives[0][1], 'text/html')

    def test_disabled_is_success_without_sending(self):
        result = send_evaluation_notification(summary(), EmailConfig())
        self.assertTrue(result.success)
        self.assertEqual(mail.outbox, [])

    def test_invalid_summary_is_not_sent(self):
        result = send_evaluation_notification(summary(lecturer_name=''), ENABLED)
        self.assertFalse(result.success)
        self.assertEqual(result.error, 'Invalid summary: lecturerName is required')
        self.assertEqual(mail.outbox, [])

    @mock.patch('core.notifications.EmailMultiAlternatives.send', side_effect=OSError('SMTP down'))
    def test_transport_failure_is_reported(self, send):
        result = send_evaluation_notification(summary(), ENABLED)
        self.assertFalse(result.success)
        self.assertEqual(result.error, 'SMTP down')

    @mock.patch('core.notifications.format_email_content', side_effect=RuntimeError('boom'))
    def test_safe_send_never_raises(self, format_content):
        with self.assertLogs('core.notifications', level='ERROR'):
            send_notification_safe(summary(), ENABLED)


class DispatchTests(SimpleTestCase):
    @override_settings(EVALUATION_NOTIFICATIONS_ASYNC=False)
    def test_sends_one_mail_per_summary(self):
        dispatch_evaluation_notifications([summary(), summary(lecturer_name='Ustaz Abu')], ENABLED)
        self.assertEqual([m.subject for m in mail.outbox], [
            'Penilaian Baru: Ustaz Ali - 2025-01-06',
            'Penilaian Baru: Ustaz Abu - 2025-01-06',
        ])

    @override_settings(EVALUATION_NOTIFICATIONS_ASYNC=True)
    @mock.patch('core.tasks.send_evaluation_notification_task.delay')
    def test_disabled_config_enqueues_nothing(self, delay):
        dispatch_evaluation_notifications([summary()], EmailConfig())
        delay.assert_not_called()

    @override_settings(EVALUATION_NOTIFICATIONS_ASYNC=True)
    @mock.patch('core.tasks.send_evaluation_notification_task.delay', side_effect=ConnectionError('no redis'))
    def test_broker_failure_is_logged(self, delay):
        with self.assertLogs('core.tasks', level='ERROR'):
            dispatch_evaluation_notifications([summary()], ENABLED)
        self.assertEqual(delay.call_count, 1)
