from django.contrib import admin
from .models import Comment, CommentReaction


class CommentReactionInline(admin.TabularInline):
    model = CommentReaction
    extra = 0
    readonly_fields = ['created_at']


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ['id', 'task', 'author', 'is_edited', 'created_at']
    list_filter = ['is_edited', 'created_at']
    search_fields = ['text']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [CommentReactionInline]
