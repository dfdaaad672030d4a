from django.contrib import admin

from .models import Lecturer, LectureSession


@admin.register(Lecturer)
class LecturerAdmin(admin.ModelAdmin):
    list_display = ('name', 'sort_order', 'created_at')
    search_fields = ('name',)
    ordering = ('sort_order', 'name')


@admin.register(LectureSession)
class LectureSessionAdmin(admin.ModelAdmin):
    list_display = ('week', 'day', 'lecture_type', 'lecturer', 'month', 'year', 'is_active')
    list_filter = ('lecture_type', 'day', 'week', 'is_active')
    search_fields = ('lecturer__name',)
    list_select_related = ('lecturer',)
