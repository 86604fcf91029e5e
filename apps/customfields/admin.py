from django.contrib import admin

from .models import CustomField, CustomFieldValue


@admin.register(CustomField)
class CustomFieldAdmin(admin.ModelAdmin):

    list_display = ['label', 'key', 'object_type', 'field_type', 'required', 'position', 'tenant']
    list_filter = ['tenant', 'object_type', 'field_type']
    search_fields = ['label', 'key']
    ordering = ['tenant', 'object_type', 'position']


@admin.register(CustomFieldValue)
class CustomFieldValueAdmin(admin.ModelAdmin):

    list_display = ['field', 'object_type', 'object_id', 'value', 'tenant', 'updated_at']
    list_filter = ['tenant', 'object_type']
    list_select_related = ['field', 'tenant']
