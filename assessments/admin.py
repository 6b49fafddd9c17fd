from django.contrib import admin

from .models import ExamResult, ExamSession, StudentAnswer


class StudentAnswerInline(admin.TabularInline):
    model = StudentAnswer
    extra = 0
    fields = ('question_number', 'question', 'answer', 'is_correct', 'awarded_marks', 'grader_comment')
    readonly_fields = ('question_number', 'question', 'answer')


@admin.register(ExamSession)
class ExamSessionAdmin(admin.ModelAdmin):
    list_display = ('user', 'exam', 'attempt_number', 'start_time', 'is_finished', 'is_corrected', 'total_score')
    list_filter = ('is_finished', 'is_corrected')
    inlines = [StudentAnswerInline]


@admin.register(ExamResult)
class ExamResultAdmin(admin.ModelAdmin):
    list_display = ('user', 'exam', 'total_score', 'score_percent', 'is_passed', 'result_type')
    list_filter = ('is_passed', 'result_type')
