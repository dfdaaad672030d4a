from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


class Lecturer(models.Model):
    name = models.CharField(max_length=200)
    image = models.ImageField(upload_to='lecturer-photos/', null=True, blank=True)
    description = models.TextField(null=True, blank=True)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['sort_order', 'name']

    def __str__(self):
        return self.name

    def delete(self, *args, **kwargs):
        # Evaluations and sessions keep their rows with the reference nulled
        if self.image:
            self.image.delete(save=False)
        return super().delete(*args, **kwargs)


class LectureSession(models.Model):
    DAY_CHOICES = (
        ('Isnin', 'Isnin'),
        ('Selasa', 'Selasa'),
        ('Rabu', 'Rabu'),
        ('Khamis', 'Khamis'),
        ('Jumaat', 'Jumaat'),
        ('Sabtu', 'Sabtu'),
        ('Ahad', 'Ahad'),
    )

    SUBUH = 'Subuh'
    MAGHRIB = 'Maghrib'
    TAZKIRAH_JUMAAT = 'Tazkirah Jumaat'

    LECTURE_TYPE_CHOICES = (
        (SUBUH, 'Subuh'),
        (MAGHRIB, 'Maghrib'),
        (TAZKIRAH_JUMAAT, 'Tazkirah Jumaat'),
    )

    # month=0 and year=0 mark a session that repeats every month
    month = models.PositiveSmallIntegerField(default=0, validators=[MaxValueValidator(12)])
    year = models.PositiveIntegerField(default=0)
    week = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    day = models.CharField(max_length=10, choices=DAY_CHOICES)
    lecture_type = models.CharField(max_length=20, choices=LECTURE_TYPE_CHOICES)
    is_active = models.BooleanField(default=True)
    lecturer = models.ForeignKey(
        Lecturer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sessions'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['week', 'id']
        unique_together = ('month', 'year', 'week', 'day', 'lecture_type')

    def __str__(self):
        return f"M{self.week} {self.day} {self.lecture_type}"

    @property
    def is_recurring(self):
        return self.month == 0 and self.year == 0
