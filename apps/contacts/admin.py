from django.contrib import admin
from .models import Contact, Company


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):

    list_display = ['first_name', 'last_name', 'email', 'phone', 'tenant', 'owner', 'created_at']
    list_filter = ['tenant', 'created_at']
    search_fields = ['first_name', 'last_name', 'email', 'phone']
    readonly_fields = ['created_at', 'updated_at']
    list_select_related = ['tenant', 'owner']


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):

    list_display = ['name', 'website', 'phone', 'tenant', 'owner', 'created_at']
    list_filter = ['tenant', 'created_at']
    search_fields = ['name', 'website']
    readonly_fields = ['created_at', 'updated_at']
    list_select_related = ['tenant', 'owner']
