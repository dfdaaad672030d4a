from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView, TokenVerifyView

from .views import LoginView, SiteConfigView, QRCodeView

urlpatterns = [
    # JWT Authentication endpoints
    path('auth/jwt/create/', LoginView.as_view(), name='jwt-create'),
    path('auth/jwt/refresh/', TokenRefreshView.as_view(), name='jwt-refresh'),
    path('auth/jwt/verify/', TokenVerifyView.as_view(), name='jwt-verify'),
    path('settings/', SiteConfigView.as_view(), name='site-settings'),
    path('qrcode/', QRCodeView.as_view(), name='qrcode'),
]
