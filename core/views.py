import logging
from dataclasses import asdict

from django.conf import settings
from drf_spectacular.utils import extend_schema, OpenApiResponse
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from .permissions import IsAdminUser
from .qr import QRCodeError, generate_qr_code
from .serializers import SiteConfigSerializer, QRCodeResponseSerializer
from .throttles import LoginRateThrottle
from .services import load_site_config, save_site_config

logger = logging.getLogger(__name__)


class LoginView(TokenObtainPairView):
    """JWT pair for an admin username and password, rate limited per client."""
    throttle_classes = [LoginRateThrottle]


class SiteConfigView(APIView):
    """Admin settings screen: notifications, alert threshold and form options."""
    permission_classes = [IsAdminUser]

    @extend_schema(responses={200: SiteConfigSerializer}, summary="Get site settings")
    def get(self, request):
        return Response(SiteConfigSerializer(asdict(load_site_config())).data)

    @extend_schema(
        request=SiteConfigSerializer,
        responses={
            200: SiteConfigSerializer,
            400: OpenApiResponse(description="Invalid email list or alert threshold."),
        },
        summary="Update site settings"
    )
    def patch(self, request):
        serializer = SiteConfigSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        config = save_site_config(**serializer.validated_data)
        logger.info(f"Site settings updated by {request.user}: {sorted(serializer.validated_data)}")
        return Response(
            {
                'success': True,
                'message': 'Tetapan berjaya dikemaskini',
                'settings': SiteConfigSerializer(asdict(config)).data,
            },
            status=status.HTTP_200_OK
        )


class QRCodeView(APIView):
    """QR code pointing at the public evaluation form."""
    permission_classes = [IsAdminUser]

    @extend_schema(responses={200: QRCodeResponseSerializer}, summary="QR code for the public form")
    def get(self, request):
        form_url = settings.PUBLIC_FORM_URL
        data_url, error_message = '', ''
        try:
            data_url = generate_qr_code(form_url)
        except QRCodeError as e:
            logger.error(f"Error generating QR code: {e}")
            error_message = str(e)
        return Response({
            'form_url': form_url,
            'qr_code_data_url': data_url,
            'error_message': error_message,
        })
