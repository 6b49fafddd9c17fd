from rest_framework import permissions

from users.models import User

GRADER_ROLES = {str(User.Role.TEACHER), str(User.Role.ADMIN)}


class IsGraderOrAdmin(permissions.BasePermission):
    """
    Teachers, platform admins and staff accounts: grading and proctoring.
    Students are always refused.
    """
    message = "Only teachers and admins can grade or proctor exams."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_staff or str(getattr(user, 'role', '')) in GRADER_ROLES
