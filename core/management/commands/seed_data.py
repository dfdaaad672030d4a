from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from core.models import SiteSetting
from core.services import DEFAULT_ALERT_THRESHOLD
from lectures.models import Lecturer, LectureSession

User = get_user_model()

LECTURERS = [
    ('Ustaz Ahmad Fauzi', 'Tafsir dan Tadabbur Al-Quran'),
    ('Ustaz Muhammad Hafiz', 'Fiqh Ibadah'),
    ('Ustaz Abdul Rahman', 'Sirah Nabawiyah'),
    ('Ustaz Zulkifli Hassan', 'Akidah'),
]

# (day, lecture type) held every week of the month
WEEKLY_SLOTS = [
    ('Isnin', LectureSession.MAGHRIB),
    ('Rabu', LectureSession.MAGHRIB),
    ('Jumaat', LectureSession.TAZKIRAH_JUMAAT),
    ('Ahad', LectureSession.SUBUH),
]


class Command(BaseCommand):
    help = 'Seeds an admin user, default site settings, lecturers and a recurring weekly schedule'

    def add_arguments(self, parser):
        parser.add_argument('--admin-username', default='admin')
        parser.add_argument('--admin-password', default='Admin@123')

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('Starting to seed data...')
        self.create_admin(options['admin_username'], options['admin_password'])
        self.create_settings()
        lecturers = self.create_lecturers()
        self.create_schedule(lecturers)
        self.stdout.write(self.style.SUCCESS('Successfully seeded all data!'))

    def create_admin(self, username, password):
        if User.objects.filter(is_staff=True).exists():
            return
        User.objects.create_superuser(username=username, email='', password=password)
        self.stdout.write(f'Created admin user: {username}')

    def create_settings(self):
        defaults = {
            SiteSetting.EMAIL_NOTIFICATIONS_ENABLED: False,
            SiteSetting.ADMIN_EMAILS: [],
            SiteSetting.ALERT_THRESHOLD: DEFAULT_ALERT_THRESHOLD,
            SiteSetting.SHOW_RECOMMENDATION_SECTION: True,
        }
        for key, value in defaults.items():
            SiteSetting.objects.get_or_create(key=key, defaults={'value': value})
        self.stdout.write('Created default settings')

    def create_lecturers(self):
        lecturers = []
        for order, (name, description) in enumerate(LECTURERS):
            lecturer, created = Lecturer.objects.get_or_create(
                name=name, defaults={'description': description, 'sort_order': order}
            )
            lecturers.append(lecturer)
            if created:
                self.stdout.write(f'Created lecturer: {name}')
        return lecturers

    def create_schedule(self, lecturers):
        created = 0
        for week in range(1, 6):
            for index, (day, lecture_type) in enumerate(WEEKLY_SLOTS):
                lecturer = lecturers[(week + index) % len(lecturers)]
                _, was_created = LectureSession.objects.get_or_create(
                    month=0, year=0, week=week, day=day, lecture_type=lecture_type,
                    defaults={'lecturer': lecturer},
                )
                created += was_created
        self.stdout.write(f'Created {created} recurring sessions')
