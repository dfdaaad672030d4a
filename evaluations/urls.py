from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import EvaluationSubmitView, EvaluationViewSet, CommentViewSet, DraftView

router = DefaultRouter()
router.register(r'comments', CommentViewSet, basename='comment')
router.register(r'records', EvaluationViewSet, basename='evaluation')

urlpatterns = [
    path('submit/', EvaluationSubmitView.as_view(), name='evaluation-submit'),
    path('drafts/<str:token>/', DraftView.as_view(), name='evaluation-draft'),
    path('', include(router.urls)),
]
