from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['email', 'name', 'role', 'admin', 'is_active', 'created_at']
    list_filter = ['role', 'is_active', 'is_staff']
    search_fields = ['email', 'name']
    ordering = ['name']
    readonly_fields = ['admin_invite_token', 'created_at', 'updated_at']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Team', {'fields': ('name', 'role', 'admin', 'admin_invite_token', 'profile_image_url')}),
        ('Timestamps', {'fields': ('created_at', 'updated_at')}),
    )
