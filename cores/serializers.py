from rest_framework import serializers
from .models import PlatformSetting


class PlatformSettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = PlatformSetting
        fields = ['site_name', 'support_email', 'answer_grace_seconds', 'leaderboard_limit']
