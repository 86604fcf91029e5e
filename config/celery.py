# Celery runs the CRM's background jobs:
# - Stage automation emails (when PIPELINE_AUTOMATIONS_ASYNC is on)
# - Overdue task reminders
#
# Start worker: celery -A config worker -l info
# Start beat: celery -A config beat -l info
# ==============================================================================

import os
from celery import Celery
from celery.schedules import crontab

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('pipelinecrm')

# All settings prefixed with 'CELERY_' will be used
app.config_from_object('django.conf:settings', namespace='CELERY')

# Looks for tasks.py in each installed app
app.autodiscover_tasks()


# CELERY BEAT SCHEDULE (Periodic Tasks)
app.conf.beat_schedule = {
    'send-task-due-reminders': {
        'task': 'apps.activities.tasks.send_task_due_reminders',
        'schedule': crontab(minute='*/15'),  # Every 15 minutes
    },
}


# CELERY TASK ANNOTATIONS
app.conf.task_annotations = {
    # Keep outbound email under the provider's rate limit
    'apps.automations.tasks.deliver_stage_automations': {
        'rate_limit': '60/m',
    },
}
