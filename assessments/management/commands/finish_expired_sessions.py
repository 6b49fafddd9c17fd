from django.core.management.base import BaseCommand
from django.utils import timezone

from assessments.services import finish_expired_sessions
from exams.models import Exam


class Command(BaseCommand):
    help = 'Finishes every open exam session whose time has run out'

    def add_arguments(self, parser):
        parser.add_argument('--exam', type=int, help='Only sweep sessions of this exam id')

    def handle(self, *args, **options):
        exam = None
        if options.get('exam'):
            try:
                exam = Exam.objects.get(id=options['exam'])
            except Exam.DoesNotExist:
                self.stdout.write(self.style.ERROR(f"Exam {options['exam']} not found!"))
                return

        count = finish_expired_sessions(timezone.now(), exam=exam)
        self.stdout.write(self.style.SUCCESS(f"Finished {count} expired session(s)"))
