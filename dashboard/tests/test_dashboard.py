from datetime import date
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from analytics.tests.factories import record
from core.models import SiteSetting
from dashboard.views import rank_lecturers
from evaluations.tests.factories import make_evaluation
from lectures.models import Lecturer, LectureSession

User = get_user_model()


class RankLecturersTests(SimpleTestCase):
    def test_mean_of_evaluation_scores(self):
        evaluations = [
            record(4, 4, 4, 3, lecturer_id=1, lecturer_name='Ali'),
            record(3, lecturer_id=1, lecturer_name='Ali'),
            record(2, lecturer_id=2, lecturer_name='Abu'),
            record(4, lecturer_id=None, lecturer_name=None),
        ]
        top, lowest = rank_lecturers(evaluations)
        self.assertEqual(top, {'name': 'Ali', 'avg_score': 3.375})
        self.assertEqual(lowest, {'name': 'Abu', 'avg_score': 2.0})

    def test_ties_keep_first_seen(self):
        evaluations = [record(3, lecturer_id=1, lecturer_name='Ali'), record(3, lecturer_id=2, lecturer_name='Abu')]
        top, lowest = rank_lecturers(evaluations)
        self.assertEqual(top['name'], 'Ali')
        self.assertEqual(lowest['name'], 'Ali')

    def test_empty(self):
        self.assertEqual(rank_lecturers([]), (None, None))


@mock.patch('dashboard.views.local_today', return_value=date(2025, 1, 20))
class DashboardApiTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(username='admin', password='pass12345', is_staff=True)
        self.client.force_authenticate(self.admin)
        self.ali = Lecturer.objects.create(name='Ustaz Ali')
        self.abu = Lecturer.objects.create(name='Ustaz Abu')
        Lecturer.objects.create(name='Ustazah Siti')

        LectureSession.objects.create(month=1, year=2025, week=1, day='Isnin', lecture_type='Subuh', lecturer=self.ali)
        LectureSession.objects.create(month=1, year=2025, week=2, day='Isnin', lecture_type='Subuh', lecturer=self.abu)
        LectureSession.objects.create(week=3, day='Jumaat', lecture_type='Tazkirah Jumaat', lecturer=self.ali)

        make_evaluation(self.ali, scores=(4, 4, 4, 3), evaluation_date=date(2025, 1, 15), lecturer_comment='Bagus')
        make_evaluation(self.ali, scores=(3, 3, 3, 3), evaluation_date=date(2025, 1, 6))
        make_evaluation(self.abu, scores=(2, 1, 2, 1), evaluation_date=date(2025, 1, 18), mosque_suggestion='Kipas')
        make_evaluation(self.abu, scores=(2, 2, 1, 1), evaluation_date=date(2025, 1, 7), lecturer_comment='')
        make_evaluation(self.abu, scores=(4, 4, 4, 4), evaluation_date=date(2024, 12, 9), lecturer_comment='Lama')

    def test_kpis(self, today):
        response = self.client.get(reverse('dashboard-list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data
        self.assertEqual(data['total_evaluations'], 4)
        self.assertEqual(data['total_lecturers'], 3)
        self.assertEqual(data['total_sessions'], 2)
        self.assertEqual(data['top_lecturer'], {'name': 'Ustaz Ali', 'avg_score': 3.375})
        self.assertEqual(data['lowest_lecturer'], {'name': 'Ustaz Abu', 'avg_score': 1.5})
        self.assertEqual(data['month_name'], 'Januari')
        self.assertEqual(data['year'], 2025)

    def test_recent_comments(self, today):
        comments = self.client.get(reverse('dashboard-list')).data['recent_comments']
        self.assertEqual([(c['lecturer_name'], c['date']) for c in comments], [
            ('Ustaz Abu', '2025-01-18'),
            ('Ustaz Ali', '2025-01-15'),
        ])
        self.assertEqual(comments[0]['mosque_suggestion'], 'Kipas')

    def test_alerts_use_stored_threshold(self, today):
        alerts = self.client.get(reverse('dashboard-list')).data['alerts']
        self.assertEqual(len(alerts), 1)
        self.assertEqual(alerts[0]['lecturer_name'], 'Ustaz Abu')
        self.assertEqual(alerts[0]['severity'], 'warning')
        self.assertEqual(alerts[0]['message'], '⚡ Amaran: Ustaz Abu mempunyai purata skor 1.50/4.00 (2 penilaian)')
        self.assertEqual(alerts[0]['last_evaluation_date'], '2025-01-18')

        SiteSetting.put(SiteSetting.ALERT_THRESHOLD, 3.5)
        data = self.client.get(reverse('dashboard-list')).data
        self.assertEqual(data['alert_threshold'], 3.5)
        self.assertEqual([a['lecturer_name'] for a in data['alerts']], ['Ustaz Abu', 'Ustaz Ali'])

    def test_trend(self, today):
        response = self.client.get(reverse('dashboard-trend'), {'months': 3})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['labels'], ['Nov 2024', 'Dis 2024', 'Jan 2025'])
        self.assertEqual(response.data['values'], [None, 4.0, 2.4375])
        self.assertEqual(response.data['direction'], 'declining')
        self.assertTrue(response.data['is_valid'])

    def test_trend_for_one_lecturer(self, today):
        response = self.client.get(reverse('dashboard-trend'), {'months': 3, 'lecturer': self.ali.id})
        self.assertEqual(response.data['values'], [None, None, 3.375])
        self.assertEqual(response.data['direction'], 'insufficient')

    def test_trend_defaults_to_six_months(self, today):
        response = self.client.get(reverse('dashboard-trend'), {'months': 'banyak'})
        self.assertEqual(len(response.data['points']), 6)

    def test_comparison(self, today):
        response = self.client.get(reverse('dashboard-comparison'), {'lecturers': f'{self.ali.id},999,x'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['selected_ids'], [self.ali.id, 999])
        ali, unknown = response.data['comparisons']
        self.assertEqual(ali['lecturer_name'], 'Ustaz Ali')
        self.assertEqual(ali['values'], [3.5, 3.5, 3.5, 3.0])
        self.assertEqual(ali['avg_overall'], 3.38)
        self.assertEqual(ali['recommendation_yes_percent'], 100.0)
        self.assertEqual(ali['color'], 'rgba(59, 130, 246, 0.8)')
        self.assertEqual(unknown['lecturer_name'], 'Unknown')
        self.assertEqual(unknown['total_evaluations'], 0)
        self.assertEqual(response.data['labels'], ['Tajuk', 'Ilmu', 'Penyampaian', 'Masa'])
        self.assertEqual(len(response.data['lecturers']), 3)

    def test_comparison_for_a_month(self, today):
        response = self.client.get(reverse('dashboard-comparison'), {
            'lecturers': str(self.abu.id), 'month': 12, 'year': 2024,
        })
        self.assertEqual(response.data['comparisons'][0]['total_evaluations'], 1)
        self.assertEqual(response.data['comparisons'][0]['avg_overall'], 4.0)

    def test_every_comparison_gets_a_colour(self, today):
        ids = ','.join(str(i) for i in range(1000, 1010))
        response = self.client.get(reverse('dashboard-comparison'), {'lecturers': ids})
        comparisons = response.data['comparisons']
        self.assertEqual(len(comparisons), 10)
        self.assertTrue(all(c['color'] for c in comparisons))
        self.assertEqual(comparisons[8]['color'], comparisons[0]['color'])
        self.assertEqual(len(response.data['colors']), 10)

    def test_comparison_without_selection(self, today):
        response = self.client.get(reverse('dashboard-comparison'))
        self.assertEqual(response.data['comparisons'], [])
        self.assertEqual(response.data['colors'], [])

    def test_requires_staff(self, today):
        self.client.force_authenticate(None)
        response = self.client.get(reverse('dashboard-list'))
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
