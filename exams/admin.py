from django.contrib import admin

from .models import Exam, Question, QuestionSnapshot


class QuestionInline(admin.TabularInline):
    model = Question
    extra = 0


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    list_display = ('title', 'duration_minutes', 'is_published', 'result_policy', 'start_time', 'end_time')
    list_filter = ('is_published', 'timer_type', 'result_policy')
    inlines = [QuestionInline]


@admin.register(QuestionSnapshot)
class QuestionSnapshotAdmin(admin.ModelAdmin):
    list_display = ('exam', 'question_number', 'question_type', 'score_value', 'created_at')
    list_filter = ('question_type',)

    def has_change_permission(self, request, obj=None):
        return False
