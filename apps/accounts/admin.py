from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _
from django.utils.html import format_html
from .models import User


# CUSTOM USER ADMIN
@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = (
        'email',
        'get_full_name_display',
        'tenant',
        'role_badge',
        'is_active_badge',
        'date_joined',
    )

    list_display_links = ('email', 'get_full_name_display')

    list_filter = (
        'role',
        'is_active',
        'is_staff',
        'is_superuser',
        'tenant',
        'date_joined',
    )
    search_fields = (
        'email',
        'first_name',
        'last_name',
        'tenant__name',
    )
    ordering = ('-date_joined',)
    readonly_fields = ('date_joined', 'updated_at', 'last_login')
    actions = ['activate_users', 'deactivate_users']

    fieldsets = (
        (None, {
            'fields': ('email', 'password'),
        }),
        (_('Personal Information'), {
            'fields': ('first_name', 'last_name', 'avatar'),
        }),
        (_('Tenant & Role'), {
            'fields': ('tenant', 'role'),
        }),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        (_('Timestamps'), {
            'fields': ('last_login', 'date_joined', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'first_name', 'last_name', 'tenant', 'role', 'password1', 'password2'),
        }),
    )

    # CUSTOM DISPLAY METHODS
    def get_full_name_display(self, obj):
        return obj.get_full_name()

    get_full_name_display.short_description = _('Full Name')
    get_full_name_display.admin_order_field = 'first_name'

    def role_badge(self, obj):

        color = '#28a745' if obj.role == 'admin' else '#007bff'

        return format_html(
            '<span style="background: {}; color: white; padding: 3px 10px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            color, obj.get_role_display()
        )

    role_badge.short_description = _('Role')
    role_badge.admin_order_field = 'role'

    def is_active_badge(self, obj):
        color, label = ('#28a745', _('Active')) if obj.is_active else ('#dc3545', _('Inactive'))
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 10px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            color, label
        )

    is_active_badge.short_description = _('Status')
    is_active_badge.admin_order_field = 'is_active'

    # ACTIONS
    @admin.action(description=_('Activate selected users'))
    def activate_users(self, request, queryset):
        updated = queryset.update(is_active=True)
        self.message_user(request, _('{} user(s) activated.').format(updated))

    @admin.action(description=_('Deactivate selected users'))
    def deactivate_users(self, request, queryset):
        updated = queryset.exclude(pk=request.user.pk).update(is_active=False)
        self.message_user(request, _('{} user(s) deactivated.').format(updated))

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('tenant')
