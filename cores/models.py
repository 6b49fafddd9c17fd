from django.db import models
from django.core.cache import cache

CACHE_KEY = 'platform_settings'


class PlatformSetting(models.Model):
    # --- General ---
    site_name = models.CharField(max_length=100, default="Exam Hall")
    support_email = models.EmailField(default="support@example.org")

    # --- Exam engine ---
    answer_grace_seconds = models.PositiveIntegerField(
        default=30, help_text="Seconds after the deadline during which answers are still accepted"
    )
    leaderboard_limit = models.PositiveIntegerField(default=10, help_text="Default number of leaderboard rows")

    def save(self, *args, **kwargs):
        self.pk = 1  # Singleton pattern
        super().save(*args, **kwargs)
        cache.set(CACHE_KEY, self)

    def delete(self, *args, **kwargs):
        pass

    @classmethod
    def load(cls):
        obj = cache.get(CACHE_KEY)
        if obj is None:
            obj, created = cls.objects.get_or_create(pk=1)
            cache.set(CACHE_KEY, obj)
        return obj

    def __str__(self):
        return "Platform Settings"
