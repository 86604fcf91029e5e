"""
Automation email composition and sending through Django's mail framework.

The transport is whatever EMAIL_BACKEND points at (console in development,
locmem in tests, ResendEmailBackend or SMTP in production).
"""

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.utils.html import escape


def deal_subject(deal_title):
    return f'Deal Update: {deal_title}'


def task_subject(template_name):
    return f'Task Completed: {template_name}'


def build_html_email(message, subject):
    """Wrap a plain-text message in a minimal HTML document with the footer."""
    return (
        '<!DOCTYPE html>\n'
        '<html>\n'
        '<head>\n'
        '  <meta charset="UTF-8">\n'
        f'  <title>{escape(subject)}</title>\n'
        '</head>\n'
        '<body style="font-family: sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; line-height: 1.6;">\n'
        f'  <div style="white-space: pre-wrap; color: #333;">{escape(message)}</div>\n'
        '  <hr style="margin-top: 30px; border: none; border-top: 1px solid #e0e0e0;">\n'
        '  <p style="color: #666; font-size: 12px; margin-top: 20px;">\n'
        f'    {settings.AUTOMATION_EMAIL_FOOTER}\n'
        '  </p>\n'
        '</body>\n'
        '</html>'
    )


def send_automation_email(to, subject, message):
    """
    Send one automation email. Errors from the backend propagate.

    Returns:
        int: number of messages the backend accepted (0 or 1)
    """
    email = EmailMultiAlternatives(
        subject=subject,
        body=message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[to],
    )
    email.attach_alternative(build_html_email(message, subject), 'text/html')
    return email.send(fail_silently=False)
