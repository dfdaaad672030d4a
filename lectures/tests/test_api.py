from datetime import date
from unittest import mock

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from lectures.models import Lecturer, LectureSession

User = get_user_model()


class AdminTestMixin:
    def login_admin(self):
        self.admin = User.objects.create_user(username='admin', password='pass12345', is_staff=True)
        self.client.force_authenticate(self.admin)


class LecturerApiTests(AdminTestMixin, APITestCase):
    def test_requires_staff(self):
        response = self.client.get(reverse('lecturer-list'))
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

        user = User.objects.create_user(username='public', password='pass12345')
        self.client.force_authenticate(user)
        response = self.client.get(reverse('lecturer-list'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_trims_name_and_lists_in_sort_order(self):
        self.login_admin()
        self.client.post(reverse('lecturer-list'), {'name': '  Ustaz Zaki ', 'sort_order': 2}, format='json')
        self.client.post(reverse('lecturer-list'), {'name': 'Ustaz Amin', 'sort_order': 1}, format='json')
        self.client.post(reverse('lecturer-list'), {'name': 'Ustaz Bakar', 'sort_order': 1}, format='json')

        response = self.client.get(reverse('lecturer-list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([l['name'] for l in response.data], ['Ustaz Amin', 'Ustaz Bakar', 'Ustaz Zaki'])

    def test_blank_name_rejected(self):
        self.login_admin()
        response = self.client.post(reverse('lecturer-list'), {'name': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data)

    def test_delete_orphans_sessions(self):
        self.login_admin()
        lecturer = Lecturer.objects.create(name='Ustaz Ali')
        session = LectureSession.objects.create(week=1, day='Isnin', lecture_type='Subuh', lecturer=lecturer)

        response = self.client.delete(reverse('lecturer-detail', args=[lecturer.id]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        session.refresh_from_db()
        self.assertIsNone(session.lecturer)


class LectureSessionApiTests(AdminTestMixin, APITestCase):
    def setUp(self):
        self.login_admin()
        self.lecturer = Lecturer.objects.create(name='Ustaz Ali')

    def test_created_sessions_are_recurring(self):
        response = self.client.post(reverse('lecture-session-list'), {
            'week': 2, 'day': 'Rabu', 'lecture_type': 'Maghrib', 'lecturer': self.lecturer.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['month'], 0)
        self.assertEqual(response.data['year'], 0)
        self.assertTrue(response.data['is_recurring'])
        self.assertTrue(response.data['is_active'])

    def test_duplicate_session_rejected(self):
        payload = {'week': 2, 'day': 'Rabu', 'lecture_type': 'Maghrib', 'lecturer': self.lecturer.id}
        self.client.post(reverse('lecture-session-list'), payload, format='json')
        response = self.client.post(reverse('lecture-session-list'), payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['non_field_errors'], ['Sesi ini sudah wujud'])
        self.assertEqual(LectureSession.objects.count(), 1)

    def test_week_out_of_range_rejected(self):
        response = self.client.post(reverse('lecture-session-list'), {
            'week': 6, 'day': 'Rabu', 'lecture_type': 'Maghrib',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('week', response.data)

    def test_toggle_active(self):
        session = LectureSession.objects.create(week=1, day='Isnin', lecture_type='Subuh', lecturer=self.lecturer)
        url = reverse('lecture-session-toggle-active', args=[session.id])

        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_active'])
        response = self.client.post(url)
        self.assertTrue(response.data['is_active'])

    def test_by_week_groups_in_timetable_order(self):
        LectureSession.objects.create(week=1, day='Jumaat', lecture_type='Maghrib', lecturer=self.lecturer)
        LectureSession.objects.create(week=1, day='Jumaat', lecture_type='Subuh', lecturer=self.lecturer)
        LectureSession.objects.create(week=3, day='Isnin', lecture_type='Subuh', lecturer=self.lecturer)

        response = self.client.get(reverse('lecture-session-by-week'))
        self.assertEqual(sorted(response.data), ['1', '2', '3', '4', '5'])
        self.assertEqual([s['lecture_type'] for s in response.data['1']], ['Subuh', 'Maghrib'])
        self.assertEqual(len(response.data['3']), 1)
        self.assertEqual(response.data['2'], [])


class PublicScheduleTests(APITestCase):
    def setUp(self):
        self.lecturer = Lecturer.objects.create(name='Ustaz Ali')

    @mock.patch('lectures.views.local_today', return_value=date(2025, 3, 10))
    def test_includes_current_month_and_recurring_sessions(self, _today):
        recurring = LectureSession.objects.create(week=1, day='Isnin', lecture_type='Subuh', lecturer=self.lecturer)
        monthly = LectureSession.objects.create(
            month=3, year=2025, week=2, day='Rabu', lecture_type='Maghrib', lecturer=self.lecturer
        )
        LectureSession.objects.create(
            month=4, year=2025, week=2, day='Rabu', lecture_type='Maghrib', lecturer=self.lecturer
        )
        LectureSession.objects.create(
            week=1, day='Selasa', lecture_type='Subuh', lecturer=self.lecturer, is_active=False
        )
        LectureSession.objects.create(week=1, day='Rabu', lecture_type='Subuh', lecturer=None)

        response = self.client.get(reverse('public-schedule'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        weeks = response.data['sessions_by_week']
        self.assertEqual([s['id'] for s in weeks['1']['sessions']], [recurring.id])
        self.assertEqual([s['id'] for s in weeks['2']['sessions']], [monthly.id])
        self.assertEqual(weeks['1']['lecturer_ids'], [self.lecturer.id])
        self.assertEqual(weeks['1']['sessions'][0]['card']['name'], 'Ustaz Ali')
        self.assertEqual(response.data['current_month'], 3)
        self.assertEqual(response.data['current_year'], 2025)
        self.assertEqual(response.data['today'], '2025-03-10')
        self.assertTrue(response.data['show_recommendation_section'])
