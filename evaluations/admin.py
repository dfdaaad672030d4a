from django.contrib import admin

from .models import Evaluation


@admin.register(Evaluation)
class EvaluationAdmin(admin.ModelAdmin):
    list_display = ('evaluator_name', 'lecturer', 'evaluation_date', 'q1_topic', 'q2_knowledge',
                    'q3_delivery', 'q4_time', 'recommend_continue')
    list_filter = ('evaluation_date', 'recommend_continue', 'session__lecture_type')
    search_fields = ('evaluator_name', 'lecturer__name', 'lecturer_comment', 'mosque_suggestion')
    list_select_related = ('lecturer', 'session')
    date_hierarchy = 'evaluation_date'

    def has_change_permission(self, request, obj=None):
        return False
