from django.contrib import admin

from .models import Activity


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):

    list_display = ['__str__', 'type', 'status', 'assigned_user', 'due_at', 'completed_at', 'tenant', 'created_at']
    list_filter = ['tenant', 'type', 'status', 'created_at']
    search_fields = ['body']
    readonly_fields = ['completed_at', 'reminder_sent_at', 'created_at', 'updated_at']
    list_select_related = ['tenant', 'assigned_user']
    raw_id_fields = ['deal', 'contact']
    date_hierarchy = 'created_at'
