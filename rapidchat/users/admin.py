from django.contrib import admin

from rapidchat.users import models


@admin.register(models.User)
class UserAdmin(admin.ModelAdmin):
    list_display = ["id", "email", "name", "uuid", "is_active", "created_at"]
    search_fields = ["email", "name"]
    list_filter = ["is_active", "created_at"]
    readonly_fields = ["uuid", "password", "created_at", "updated_at"]
