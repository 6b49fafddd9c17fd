from django.contrib import admin

from .models import PlatformSetting

admin.site.register(PlatformSetting)
