import logging

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAdminUser
from .models import PlatformSetting
from .serializers import PlatformSettingSerializer

logger = logging.getLogger(__name__)


class PlatformSettingView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        settings = PlatformSetting.load()
        serializer = PlatformSettingSerializer(settings)
        return Response(serializer.data)

    def put(self, request):
        settings = PlatformSetting.load()
        serializer = PlatformSettingSerializer(settings, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            logger.info("Platform settings updated by %s: %s", request.user, sorted(request.data))
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
