from django.contrib import admin
from django.utils.html import format_html

from .models import Deal


@admin.register(Deal)
class DealAdmin(admin.ModelAdmin):

    list_display = ['title', 'value_badge', 'stage_badge', 'owner', 'contact', 'company', 'tenant', 'created_at']
    list_filter = ['tenant', 'stage__is_won', 'stage__is_lost', 'created_at']
    search_fields = ['title', 'contact__first_name', 'contact__last_name', 'company__name']
    readonly_fields = ['created_at', 'updated_at']
    list_select_related = ['tenant', 'stage', 'owner', 'contact', 'company']
    raw_id_fields = ['contact', 'company']

    def value_badge(self, obj):
        return obj.value_display
    value_badge.short_description = 'Value'
    value_badge.admin_order_field = 'value_cents'

    def stage_badge(self, obj):
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
            obj.stage.color,
            obj.stage.name
        )
    stage_badge.short_description = 'Stage'
