from django.contrib import admin
from .models import Task


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ['title', 'status', 'priority', 'progress', 'due_date', 'admin']
    list_filter = ['status', 'priority', 'due_date']
    search_fields = ['title', 'description']
    date_hierarchy = 'due_date'
    filter_horizontal = ['assigned_to']
    readonly_fields = ['progress', 'created_at', 'updated_at']
