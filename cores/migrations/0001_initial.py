from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='PlatformSetting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('site_name', models.CharField(default='Exam Hall', max_length=100)),
                ('support_email', models.EmailField(default='support@example.org', max_length=254)),
                ('answer_grace_seconds', models.PositiveIntegerField(default=30, help_text='Seconds after the deadline during which answers are still accepted')),
                ('leaderboard_limit', models.PositiveIntegerField(default=10, help_text='Default number of leaderboard rows')),
            ],
        ),
    ]
