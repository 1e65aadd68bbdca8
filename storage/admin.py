# storage/admin.py

import json

from django.contrib import admin
from django.utils.html import format_html

from .models import StoredValue


@admin.register(StoredValue)
class StoredValueAdmin(admin.ModelAdmin):
    list_display = [
        'key',
        'entry_count_display',
        'size_display',
        'updated_at',
    ]

    search_fields = ['key']

    readonly_fields = ['created_at', 'updated_at', 'pretty_value']

    fieldsets = (
        ('Key', {
            'fields': ('key',)
        }),
        ('Value', {
            'fields': ('value', 'pretty_value'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    # ============================================
    # DISPLAY METHODS
    # ============================================

    def entry_count_display(self, obj):
        try:
            data = json.loads(obj.value)
        except ValueError:
            return format_html('<span style="color: #dc3545;">{}</span>', 'invalid JSON')
        if isinstance(data, list):
            return format_html('<strong>{}</strong> entr{}', len(data), 'y' if len(data) == 1 else 'ies')
        return '-'
    entry_count_display.short_description = 'Entries'

    def size_display(self, obj):
        return f"{obj.size} chars"
    size_display.short_description = 'Size'

    def pretty_value(self, obj):
        try:
            pretty = json.dumps(json.loads(obj.value), indent=2, ensure_ascii=False)
        except ValueError:
            pretty = obj.value
        return format_html('<pre style="max-height: 400px; overflow: auto;">{}</pre>', pretty)
    pretty_value.short_description = 'Formatted'
