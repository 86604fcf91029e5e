from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.urls import reverse


def format_cents(cents, thousands=True):
    """12345678 → '$123,456.78' (or '$123456.78' with thousands=False)"""
    dollars = (cents or 0) / 100
    return f'${dollars:,.2f}' if thousands else f'${dollars:.2f}'


class Deal(models.Model):

    tenant = models.ForeignKey('core.Tenant', on_delete=models.CASCADE, related_name='deals')
    pipeline = models.ForeignKey('pipeline.Pipeline', on_delete=models.CASCADE, related_name='deals')
    stage = models.ForeignKey('pipeline.Stage', on_delete=models.RESTRICT, related_name='deals', help_text='Current stage in the pipeline')
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.RESTRICT, related_name='owned_deals', help_text='User responsible for this deal')

    title = models.CharField(max_length=200)
    value_cents = models.PositiveBigIntegerField(default=0, validators=[MinValueValidator(0)], help_text='Deal value in cents')

    contact = models.ForeignKey('contacts.Contact', on_delete=models.SET_NULL, null=True, blank=True, related_name='deals')
    company = models.ForeignKey('contacts.Company', on_delete=models.SET_NULL, null=True, blank=True, related_name='deals')

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Deal'
        verbose_name_plural = 'Deals'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['tenant', 'stage'], name='deal_tenant_stage_idx'),
            models.Index(fields=['tenant', 'owner'], name='deal_tenant_owner_idx'),
            models.Index(fields=['created_at'], name='deal_created_idx'),
        ]

    def __str__(self):
        return self.title

    def get_absolute_url(self):
        return reverse('deals:deal_detail', kwargs={'pk': self.pk})

    @property
    def value_display(self):
        return format_cents(self.value_cents)

    @property
    def status(self):
        """'Won', 'Lost' or 'Open' from the current stage flags."""
        if self.stage.is_won:
            return 'Won'
        if self.stage.is_lost:
            return 'Lost'
        return 'Open'
