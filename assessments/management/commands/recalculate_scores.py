from django.core.management.base import BaseCommand

from assessments.models import ExamSession
from assessments.services import recalculate_session


class Command(BaseCommand):
    help = 'Regrades stored answers and refreshes totals and results'

    def add_arguments(self, parser):
        parser.add_argument('--exam', type=int, help='Exam id to recalculate')
        parser.add_argument('--session', type=int, help='Single session id to recalculate')

    def handle(self, *args, **options):
        sessions = ExamSession.objects.all()
        if options.get('exam'):
            sessions = sessions.filter(exam_id=options['exam'])
        if options.get('session'):
            sessions = sessions.filter(id=options['session'])

        count = 0
        for session in sessions.iterator():
            recalculate_session(session)
            count += 1

        self.stdout.write(self.style.SUCCESS(f"Recalculated {count} session(s)"))
