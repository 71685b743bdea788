from django.contrib import admin
from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone', 'phone2', 'email', 'created_at']
    search_fields = ['name', 'phone', 'phone2', 'email']
    ordering = ['name']
    readonly_fields = ['id', 'created_at', 'updated_at']
