"""
Contact & Company Views Tests
=============================

Test Coverage:
1. Create contact with tags and custom fields
2. Search
3. Tenant isolation (404 on other tenant records)
4. Delete removes custom field values
5. Stable company pagination
"""

from django.test import TestCase, Client, override_settings
from django.urls import reverse

from apps.accounts.services import create_team_member, register_tenant
from apps.contacts.models import Company, Contact
from apps.customfields.models import CustomField, OBJECT_TYPE_COMPANY, OBJECT_TYPE_CONTACT
from apps.customfields.services import create_custom_field, get_values, save_custom_field_values


class ContactViewsTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.admin = register_tenant('Acme Corp', 'Dana Scully', 'dana@acme.com', 'secret123')
        self.tenant = self.admin.tenant
        self.member = create_team_member(self.tenant, 'Fox Mulder', 'fox@acme.com', 'secret123', 'member')
        self.client.force_login(self.member)

    def test_create_contact(self):
        field = create_custom_field(self.tenant, OBJECT_TYPE_CONTACT, 'industry', 'Industry', CustomField.FIELD_TEXT)

        response = self.client.post(reverse('contacts:contact_create'), {
            'first_name': 'Ann',
            'last_name': 'Lee',
            'email': 'Ann@Client.com',
            'phone': '',
            'tags': 'vip, newsletter',
            'cf_industry': 'Retail',
        })

        contact = Contact.objects.get()
        self.assertRedirects(response, contact.get_absolute_url(), fetch_redirect_response=False)
        self.assertEqual(contact.owner, self.member)
        self.assertEqual(contact.tenant, self.tenant)
        self.assertEqual(contact.email, 'ann@client.com')
        self.assertIsNone(contact.phone)
        self.assertEqual(sorted(contact.tags.names()), ['newsletter', 'vip'])
        self.assertEqual(get_values(self.tenant, OBJECT_TYPE_CONTACT, contact.pk), {field.pk: 'Retail'})

    def test_detail_shows_custom_values(self):
        field = create_custom_field(self.tenant, OBJECT_TYPE_CONTACT, 'industry', 'Industry', CustomField.FIELD_TEXT)
        contact = Contact.objects.create(tenant=self.tenant, owner=self.admin, first_name='Ann', last_name='Lee')
        save_custom_field_values(self.tenant, OBJECT_TYPE_CONTACT, contact.pk, {field.pk: 'Retail'})

        response = self.client.get(contact.get_absolute_url())

        self.assertEqual(response.context['custom_values'], [('Industry', 'Retail')])
        self.assertContains(response, 'Retail')

    def test_search(self):
        Contact.objects.create(tenant=self.tenant, owner=self.admin, first_name='Ann', last_name='Lee', email='ann@client.com')
        Contact.objects.create(tenant=self.tenant, owner=self.admin, first_name='Bob', last_name='Stone')

        response = self.client.get(reverse('contacts:contact_list'), {'search': 'client.com'})

        self.assertEqual([c.first_name for c in response.context['contacts']], ['Ann'])
        self.assertEqual(response.context['total_count'], 1)

    def test_other_tenant_contact_not_found(self):
        other = register_tenant('Other Inc', 'Walter Skinner', 'walter@other.com', 'secret123')
        foreign = Contact.objects.create(tenant=other.tenant, owner=other, first_name='Secret', last_name='Agent')

        self.assertEqual(self.client.get(foreign.get_absolute_url()).status_code, 404)
        self.assertEqual(self.client.post(reverse('contacts:contact_delete', args=[foreign.pk])).status_code, 404)
        self.assertTrue(Contact.objects.filter(pk=foreign.pk).exists())

    def test_list_hides_other_tenant_contacts(self):
        other = register_tenant('Other Inc', 'Walter Skinner', 'walter@other.com', 'secret123')
        Contact.objects.create(tenant=other.tenant, owner=other, first_name='Secret', last_name='Agent')

        response = self.client.get(reverse('contacts:contact_list'))

        self.assertEqual(response.context['total_count'], 0)


class CompanyViewsTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.admin = register_tenant('Acme Corp', 'Dana Scully', 'dana@acme.com', 'secret123')
        self.tenant = self.admin.tenant
        self.client.force_login(self.admin)

    def test_create_company(self):
        response = self.client.post(reverse('contacts:company_create'), {
            'name': 'Globex',
            'website': 'https://globex.example.com',
            'phone': '',
        })

        company = Company.objects.get()
        self.assertRedirects(response, company.get_absolute_url(), fetch_redirect_response=False)
        self.assertEqual(company.owner, self.admin)

    def test_delete_company_removes_values(self):
        field = create_custom_field(self.tenant, OBJECT_TYPE_COMPANY, 'size', 'Size', CustomField.FIELD_NUMBER)
        company = Company.objects.create(tenant=self.tenant, owner=self.admin, name='Globex')
        save_custom_field_values(self.tenant, OBJECT_TYPE_COMPANY, company.pk, {field.pk: 50})

        response = self.client.post(reverse('contacts:company_delete', args=[company.pk]))

        self.assertRedirects(response, reverse('contacts:company_list'), fetch_redirect_response=False)
        self.assertEqual(get_values(self.tenant, OBJECT_TYPE_COMPANY, company.pk), {})

    def test_company_list_counts_deals(self):
        Company.objects.create(tenant=self.tenant, owner=self.admin, name='Globex')

        response = self.client.get(reverse('contacts:company_list'))

        self.assertEqual(response.context['companies'][0].deals_count, 0)

    @override_settings(PAGINATION_SIZE=2)
    def test_company_list_pages_are_stable(self):
        companies = [
            Company.objects.create(tenant=self.tenant, owner=self.admin, name=f'Company {i}')
            for i in range(5)
        ]

        pages = []
        for page in (1, 2, 3):
            response = self.client.get(reverse('contacts:company_list'), {'page': page})
            self.assertTrue(response.context['page_obj'].paginator.object_list.ordered)
            pages.append([company.pk for company in response.context['companies']])

        self.assertEqual([len(ids) for ids in pages], [2, 2, 1])
        # Newest first, every company exactly once
        self.assertEqual(sum(pages, []), [company.pk for company in reversed(companies)])
