from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    # --- Authentication ---
    path('api/auth/', include('users.urls')),

    # --- Platform settings (admin) ---
    path('api/', include('cores.urls')),

    # --- Exam taking, results, grading ---
    path('api/', include('assessments.urls')),
]
