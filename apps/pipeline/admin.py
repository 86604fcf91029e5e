from django.contrib import admin
from django.utils.html import format_html

from .models import Pipeline, Stage, StageAutomation


class StageInline(admin.TabularInline):
    model = Stage
    extra = 0
    fields = ['name', 'position', 'probability_percent', 'is_won', 'is_lost', 'color']
    ordering = ['position']


class StageAutomationInline(admin.TabularInline):
    model = StageAutomation
    extra = 0
    fields = ['template', 'position']
    ordering = ['position']


@admin.register(Pipeline)
class PipelineAdmin(admin.ModelAdmin):

    list_display = ['name', 'tenant', 'created_at']
    list_filter = ['tenant']
    search_fields = ['name', 'tenant__name']
    inlines = [StageInline]


@admin.register(Stage)
class StageAdmin(admin.ModelAdmin):

    list_display = ['name', 'pipeline', 'position', 'probability_percent', 'color_badge', 'is_won', 'is_lost']
    list_filter = ['pipeline__tenant', 'is_won', 'is_lost']
    list_editable = ['position', 'probability_percent']
    ordering = ['pipeline', 'position']
    inlines = [StageAutomationInline]

    def color_badge(self, obj):
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
            obj.color,
            obj.color
        )
    color_badge.short_description = 'Color'
