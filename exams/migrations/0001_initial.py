import django.db.models.deletion
from django.db import migrations, models

QUESTION_TYPES = [
    ('multiple_choice', 'Multiple Choice'),
    ('true_false', 'True / False'),
    ('multiple_selection', 'Multiple Selection'),
    ('matching', 'Matching'),
    ('sequence', 'Sequence'),
    ('math_input', 'Math Input'),
    ('short_answer', 'Short Answer'),
    ('arabic_response', 'Arabic Response'),
    ('javanese_response', 'Javanese Response'),
    ('essay', 'Essay'),
    ('arrange_words', 'Arrange Words'),
]
DIFFICULTIES = [('easy', 'Easy'), ('medium', 'Medium'), ('hard', 'Hard')]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Exam',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('duration_minutes', models.PositiveIntegerField()),
                ('pass_mark_percentage', models.PositiveIntegerField(default=50)),
                ('start_time', models.DateTimeField(blank=True, null=True)),
                ('end_time', models.DateTimeField(blank=True, null=True)),
                ('timer_type', models.CharField(choices=[('strict', 'Strict'), ('flexible', 'Flexible')], default='strict', max_length=20)),
                ('max_attempts', models.PositiveIntegerField(blank=True, null=True)),
                ('is_randomized_question', models.BooleanField(default=False)),
                ('result_policy', models.CharField(choices=[('official', 'Official Attempt'), ('best_attempt', 'Best Attempt'), ('latest_attempt', 'Latest Attempt')], default='official', max_length=20)),
                ('token', models.CharField(blank=True, max_length=32)),
                ('is_token_visible', models.BooleanField(default=False)),
                ('is_published', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name='Question',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField(default=0)),
                ('text', models.TextField()),
                ('question_type', models.CharField(choices=QUESTION_TYPES, default='multiple_choice', max_length=30)),
                ('difficulty', models.CharField(choices=DIFFICULTIES, default='medium', max_length=20)),
                ('points', models.PositiveIntegerField(default=1)),
                ('options', models.JSONField(blank=True, default=list)),
                ('answer_key', models.JSONField(blank=True, default=dict)),
                ('hint', models.TextField(blank=True)),
                ('exam', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='questions', to='exams.exam')),
            ],
            options={
                'ordering': ['position', 'id'],
            },
        ),
        migrations.CreateModel(
            name='QuestionSnapshot',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('fingerprint', models.CharField(max_length=64)),
                ('question_number', models.PositiveIntegerField()),
                ('content', models.TextField()),
                ('options', models.JSONField(blank=True, default=list)),
                ('answer_key', models.JSONField(blank=True, default=dict)),
                ('score_value', models.PositiveIntegerField()),
                ('question_type', models.CharField(choices=QUESTION_TYPES, max_length=30)),
                ('difficulty', models.CharField(choices=DIFFICULTIES, max_length=20)),
                ('hint', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('exam', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='snapshots', to='exams.exam')),
                ('source_question', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='snapshots', to='exams.question')),
            ],
        ),
        migrations.AddConstraint(
            model_name='questionsnapshot',
            constraint=models.UniqueConstraint(fields=('exam', 'fingerprint'), name='unique_snapshot_per_exam_fingerprint'),
        ),
    ]
