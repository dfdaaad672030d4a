from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from lectures.models import Lecturer, LectureSession

RATING_VALIDATORS = [MinValueValidator(1), MaxValueValidator(4)]


class Evaluation(models.Model):
    """
    One respondent's ratings for one lecturer.

    Public submissions only ever insert rows; admins may delete them or clear
    the free-text fields. Removing the lecturer or session keeps the row.
    """
    session = models.ForeignKey(
        LectureSession,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='evaluations'
    )
    lecturer = models.ForeignKey(
        Lecturer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='evaluations'
    )
    evaluator_name = models.CharField(max_length=200)
    age = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(150)])
    address = models.TextField()
    evaluation_date = models.DateField(db_index=True)

    q1_topic = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS)
    q2_knowledge = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS)
    q3_delivery = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS)
    q4_time = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS)

    recommend_continue = models.BooleanField(null=True, blank=True)
    lecturer_comment = models.TextField(null=True, blank=True)
    mosque_suggestion = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-evaluation_date', '-created_at']

    def __str__(self):
        return f"{self.evaluator_name} -> {self.lecturer or '-'} ({self.evaluation_date})"

    @property
    def score(self):
        return (self.q1_topic + self.q2_knowledge + self.q3_delivery + self.q4_time) / 4
