from django.conf import settings
from django.db import models
from django.urls import reverse
from taggit.managers import TaggableManager


class Contact(models.Model):

    tenant = models.ForeignKey('core.Tenant', on_delete=models.CASCADE, related_name='contacts')
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.RESTRICT, related_name='owned_contacts', help_text='User responsible for this contact')

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField(blank=True, null=True, help_text='Email address (optional)')
    phone = models.CharField(max_length=30, blank=True, null=True, help_text='Phone number (optional)')
    tags = TaggableManager(blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Contact'
        verbose_name_plural = 'Contacts'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['tenant', 'last_name'], name='contact_tenant_last_name_idx'),
            models.Index(fields=['tenant', 'email'], name='contact_tenant_email_idx'),
        ]

    def __str__(self):
        return self.get_full_name()

    def get_absolute_url(self):
        return reverse('contacts:contact_detail', kwargs={'pk': self.pk})

    def get_full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def get_initials(self):
        """'Ann Lee' → 'AL'"""
        return f"{self.first_name[:1]}{self.last_name[:1]}".upper() or '?'


class Company(models.Model):

    tenant = models.ForeignKey('core.Tenant', on_delete=models.CASCADE, related_name='companies')
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.RESTRICT, related_name='owned_companies', help_text='User responsible for this company')

    name = models.CharField(max_length=200)
    website = models.URLField(blank=True, null=True)
    phone = models.CharField(max_length=30, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Company'
        verbose_name_plural = 'Companies'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['tenant', 'name'], name='company_tenant_name_idx'),
        ]

    def __str__(self):
        return self.name

    def get_absolute_url(self):
        return reverse('contacts:company_detail', kwargs={'pk': self.pk})
