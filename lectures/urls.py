from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import LecturerViewSet, LectureSessionViewSet, ScheduleView

router = DefaultRouter()
router.register(r'lecturers', LecturerViewSet, basename='lecturer')
router.register(r'sessions', LectureSessionViewSet, basename='lecture-session')

urlpatterns = [
    path('schedule/', ScheduleView.as_view(), name='public-schedule'),
    path('', include(router.urls)),
]
