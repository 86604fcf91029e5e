from django.contrib import admin
from django.utils.html import format_html

from .models import AutomationTemplate, AutomationDelivery


@admin.register(AutomationTemplate)
class AutomationTemplateAdmin(admin.ModelAdmin):

    list_display = ['name', 'tenant', 'send_to', 'custom_email', 'enabled', 'created_at']
    list_filter = ['tenant', 'send_to', 'enabled']
    search_fields = ['name', 'message_template']
    readonly_fields = ['created_at', 'updated_at']
    actions = ['enable_templates', 'disable_templates']

    def enable_templates(self, request, queryset):
        updated = queryset.update(enabled=True)
        self.message_user(request, f'{updated} template(s) enabled.')
    enable_templates.short_description = 'Enable selected templates'

    def disable_templates(self, request, queryset):
        updated = queryset.update(enabled=False)
        self.message_user(request, f'{updated} template(s) disabled.')
    disable_templates.short_description = 'Disable selected templates'


@admin.register(AutomationDelivery)
class AutomationDeliveryAdmin(admin.ModelAdmin):

    STATUS_COLORS = {
        AutomationDelivery.STATUS_SENT: '#28a745',
        AutomationDelivery.STATUS_FAILED: '#dc3545',
        AutomationDelivery.STATUS_SKIPPED: '#6c757d',
    }

    list_display = ['subject', 'recipient', 'status_badge', 'trigger', 'template', 'tenant', 'created_at']
    list_filter = ['tenant', 'status', 'trigger', 'created_at']
    search_fields = ['subject', 'recipient', 'error']
    readonly_fields = [field.name for field in AutomationDelivery._meta.fields]
    list_select_related = ['tenant', 'template']

    def status_badge(self, obj):
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
            self.STATUS_COLORS.get(obj.status, '#6c757d'),
            obj.get_status_display()
        )
    status_badge.short_description = 'Status'

    def has_add_permission(self, request):
        return False
