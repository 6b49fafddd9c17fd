# assessments/signals.py
from django.dispatch import Signal

# Sent after a finish commits. kwargs: session, result
session_finished = Signal()

# Sent after a proctor ends someone else's attempt. kwargs: session, result
session_force_finished = Signal()
