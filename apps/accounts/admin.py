# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, Role


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'permissions']
    search_fields = ['code', 'name']


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for shop staff.

    Technicians need both the TECHNICIAN role and a commission rate
    to receive a staff share when their repairs are settled.
    """

    list_display = [
        'email',
        'display_name',
        'role',
        'commission_rate',
        'is_active',
        'created_at',
    ]

    list_filter = [
        'role',
        'is_active',
        'is_staff',
        'is_superuser',
    ]

    search_fields = [
        'email',
        'display_name',
    ]

    ordering = ['-created_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'display_name', 'password')
        }),
        ('Role & Commission', {
            'fields': ('role', 'commission_rate'),
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'role', 'commission_rate', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['created_at', 'last_login']
