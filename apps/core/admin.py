from django.contrib import admin
from django.utils.html import format_html

from .models import Tenant


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):

    list_display = [
        'name',
        'slug',
        'color_scheme',
        'status_badge',
        'users_count',
        'created_at'
    ]
    list_filter = ['is_active', 'color_scheme', 'created_at']
    search_fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'slug')
        }),
        ('Branding', {
            'fields': ('logo_url', 'color_scheme')
        }),
        ('Entity Labels', {
            'fields': (
                ('deals_label', 'deals_singular_label'),
                ('contacts_label', 'contacts_singular_label'),
                ('companies_label', 'companies_singular_label'),
            )
        }),
        ('Status', {
            'fields': ('is_active',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def status_badge(self, obj):

        color, label = ('#28a745', 'Active') if obj.is_active else ('#dc3545', 'Inactive')
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 10px; border-radius: 3px; font-size: 11px;">'
            '{}</span>',
            color,
            label
        )

    status_badge.short_description = 'Status'

    def users_count(self, obj):

        count = obj.get_active_users_count()
        return format_html(
            '<span style="color: #667eea; font-weight: bold;">{} users</span>',
            count
        )

    users_count.short_description = 'Users'
