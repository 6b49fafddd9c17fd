from rest_framework import serializers
from django.contrib.auth import get_user_model
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source='get_full_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'first_name', 'last_name', 'full_name', 'role', 'is_staff']
        read_only_fields = fields


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Token pair plus the logged-in user, so the client knows the role up front."""
    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = UserSerializer(self.user).data
        return data


class StudentProfileSerializer(UserSerializer):
    # Activity counters for the student dashboard
    exams_taken = serializers.SerializerMethodField()
    exams_passed = serializers.SerializerMethodField()
    open_attempts = serializers.SerializerMethodField()
    last_activity = serializers.SerializerMethodField()

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['exams_taken', 'exams_passed', 'open_attempts', 'last_activity']
        read_only_fields = fields

    def get_exams_taken(self, obj):
        return obj.exam_sessions.filter(is_finished=True).count()

    def get_exams_passed(self, obj):
        return obj.exam_results.filter(is_passed=True).count()

    def get_open_attempts(self, obj):
        return obj.exam_sessions.filter(is_finished=False).count()

    def get_last_activity(self, obj):
        last_session = obj.exam_sessions.order_by('-start_time').first()
        if last_session:
            return last_session.finish_time or last_session.start_time
        return None
