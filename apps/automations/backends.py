"""
Django email backend for the Resend HTTP API.

Enable with:
    EMAIL_BACKEND=apps.automations.backends.ResendEmailBackend
    RESEND_API_KEY=re_...
"""

import logging
from typing import Dict, List, Optional

import requests
from django.conf import settings
from django.core.mail.backends.base import BaseEmailBackend

logger = logging.getLogger(__name__)


class ResendAPIError(Exception):
    """
    Custom exception for Resend API errors

    Used to distinguish provider errors from other exceptions.
    """
    pass


class ResendEmailBackend(BaseEmailBackend):

    def __init__(self, api_key: Optional[str] = None, api_url: Optional[str] = None, fail_silently: bool = False, **kwargs):
        super().__init__(fail_silently=fail_silently, **kwargs)
        self.api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self.api_url = (api_url or settings.RESEND_API_URL).rstrip('/')

    def _get_headers(self) -> Dict[str, str]:

        return {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {self.api_key}',
        }

    def _build_payload(self, message) -> Dict:
        payload = {
            'from': message.from_email or settings.DEFAULT_FROM_EMAIL,
            'to': message.recipients(),
            'subject': message.subject,
            'text': message.body,
        }

        # Prefer the HTML alternative when there is one
        for content, mimetype in getattr(message, 'alternatives', []):
            if mimetype == 'text/html':
                payload['html'] = content
                break

        if message.reply_to:
            payload['reply_to'] = message.reply_to
        return payload

    def _send(self, message) -> bool:
        url = f"{self.api_url}/emails"

        try:
            response = requests.post(
                url,
                headers=self._get_headers(),
                json=self._build_payload(message),
                timeout=30
            )
        except requests.exceptions.Timeout:
            raise ResendAPIError('Request timeout')
        except requests.exceptions.ConnectionError:
            raise ResendAPIError('Connection error')

        if response.status_code in [200, 201]:
            logger.info(f"Email sent via Resend: {response.json().get('id')}")
            return True

        try:
            error_message = response.json().get('message', 'Unknown error')
        except ValueError:
            error_message = response.text or 'Unknown error'
        raise ResendAPIError(f"API error {response.status_code}: {error_message}")

    def send_messages(self, email_messages: List) -> int:
        if not email_messages:
            return 0

        if not self.api_key:
            logger.warning('RESEND_API_KEY not configured. Email not sent.')
            if self.fail_silently:
                return 0
            raise ResendAPIError('API key not configured')

        sent = 0
        for message in email_messages:
            if not message.recipients():
                continue
            try:
                if self._send(message):
                    sent += 1
            except ResendAPIError:
                logger.exception('Resend delivery failed')
                if not self.fail_silently:
                    raise
        return sent
