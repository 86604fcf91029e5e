"""
Tests for the custom fields settings page and JSON API.
"""

from django.test import TestCase, Client
from django.urls import reverse

from apps.accounts.services import register_tenant
from apps.customfields.models import CustomField, OBJECT_TYPE_CONTACT
from apps.customfields.services import create_custom_field


class CustomFieldApiTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.admin = register_tenant('Acme Corp', 'Dana Scully', 'dana@acme.com', 'secret123')
        self.tenant = self.admin.tenant
        self.client.force_login(self.admin)

    def test_object_type_required(self):
        response = self.client.get(reverse('custom_fields_api'))

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'error': 'objectType required'})

    def test_fields_in_position_order(self):
        create_custom_field(self.tenant, OBJECT_TYPE_CONTACT, 'industry', 'Industry', CustomField.FIELD_TEXT)
        create_custom_field(
            self.tenant, OBJECT_TYPE_CONTACT, 'tier', 'Tier', CustomField.FIELD_SELECT,
            options=[{'value': 'gold', 'label': 'Gold'}],
        )

        response = self.client.get(reverse('custom_fields_api'), {'objectType': 'contact'})

        data = response.json()
        self.assertEqual([field['key'] for field in data], ['industry', 'tier'])
        self.assertEqual(data[1]['fieldType'], 'select')
        self.assertEqual(data[1]['options'], [{'value': 'gold', 'label': 'Gold'}])

    def test_other_tenant_fields_hidden(self):
        other = register_tenant('Other Inc', 'Walter Skinner', 'walter@other.com', 'secret123')
        create_custom_field(other.tenant, OBJECT_TYPE_CONTACT, 'secret', 'Secret', CustomField.FIELD_TEXT)

        response = self.client.get(reverse('custom_fields_api'), {'objectType': 'contact'})

        self.assertEqual(response.json(), [])


class CustomFieldSettingsViewTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.admin = register_tenant('Acme Corp', 'Dana Scully', 'dana@acme.com', 'secret123')
        self.tenant = self.admin.tenant
        self.client.force_login(self.admin)

    def test_create_select_field(self):
        response = self.client.post(reverse('customfields:field_list'), {
            'object_type': 'deal',
            'key': 'lead_source',
            'label': 'Lead source',
            'field_type': 'select',
            'options': 'web|Website\nreferral\n',
        })

        self.assertRedirects(response, reverse('customfields:field_list'), fetch_redirect_response=False)
        field = CustomField.objects.get(tenant=self.tenant)
        self.assertEqual(field.options, [
            {'value': 'web', 'label': 'Website'},
            {'value': 'referral', 'label': 'referral'},
        ])

    def test_invalid_key(self):
        response = self.client.post(reverse('customfields:field_list'), {
            'object_type': 'deal',
            'key': 'Lead-Source',
            'label': 'Lead source',
            'field_type': 'text',
        })

        self.assertEqual(response.status_code, 200)
        self.assertIn('key', response.context['form'].errors)

    def test_duplicate_key_reported_on_form(self):
        create_custom_field(self.tenant, 'deal', 'region', 'Region', CustomField.FIELD_TEXT)

        response = self.client.post(reverse('customfields:field_list'), {
            'object_type': 'deal',
            'key': 'region',
            'label': 'Region',
            'field_type': 'text',
        })

        self.assertEqual(response.status_code, 200)
        self.assertIn('key', response.context['form'].errors)
