"""
Tests for the Resend email backend and the automation email body.

requests.post is mocked; nothing leaves the test process.
"""

from unittest import mock

import requests
from django.core.mail import EmailMultiAlternatives
from django.test import TestCase

from apps.automations.backends import ResendAPIError, ResendEmailBackend
from apps.automations.email import build_html_email


def _response(status_code, payload):
    response = mock.Mock(status_code=status_code, text='')
    response.json.return_value = payload
    return response


class ResendEmailBackendTest(TestCase):

    def setUp(self):
        self.backend = ResendEmailBackend(api_key='re_test', api_url='https://resend.test/')
        self.message = EmailMultiAlternatives(
            subject='Deal Update: Big Deal',
            body='Hello',
            from_email='crm@acme.com',
            to=['ann@client.com'],
        )
        self.message.attach_alternative('<p>Hello</p>', 'text/html')

    @mock.patch('apps.automations.backends.requests.post')
    def test_send_posts_payload(self, post):
        post.return_value = _response(200, {'id': 'email_123'})

        sent = self.backend.send_messages([self.message])

        self.assertEqual(sent, 1)
        args, kwargs = post.call_args
        self.assertEqual(args[0], 'https://resend.test/emails')
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer re_test')
        self.assertEqual(kwargs['json'], {
            'from': 'crm@acme.com',
            'to': ['ann@client.com'],
            'subject': 'Deal Update: Big Deal',
            'text': 'Hello',
            'html': '<p>Hello</p>',
        })

    @mock.patch('apps.automations.backends.requests.post')
    def test_api_error_raises(self, post):
        post.return_value = _response(422, {'message': 'Invalid from address'})

        with self.assertRaisesMessage(ResendAPIError, 'API error 422: Invalid from address'):
            self.backend.send_messages([self.message])

    @mock.patch('apps.automations.backends.requests.post')
    def test_api_error_silenced(self, post):
        post.return_value = _response(500, {'message': 'boom'})
        backend = ResendEmailBackend(api_key='re_test', fail_silently=True)

        self.assertEqual(backend.send_messages([self.message]), 0)

    @mock.patch('apps.automations.backends.requests.post')
    def test_timeout_raises(self, post):
        post.side_effect = requests.exceptions.Timeout()

        with self.assertRaisesMessage(ResendAPIError, 'Request timeout'):
            self.backend.send_messages([self.message])

    def test_missing_api_key(self):
        backend = ResendEmailBackend(api_key='')

        with self.assertRaises(ResendAPIError):
            backend.send_messages([self.message])


class BuildHtmlEmailTest(TestCase):

    def test_message_is_escaped(self):
        html = build_html_email('Price <b>now</b> & later', 'Deal Update: A&B')

        self.assertIn('Price &lt;b&gt;now&lt;/b&gt; &amp; later', html)
        self.assertIn('<title>Deal Update: A&amp;B</title>', html)
