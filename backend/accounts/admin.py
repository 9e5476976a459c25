from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import Branch, User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    fieldsets = (
        (None, {"fields": ("username", "password", "email")}),
        ("Access", {"fields": ("role", "branch", "is_active", "is_staff", "is_superuser")}),
        ("Soft delete", {"fields": ("is_deleted", "deleted_at", "deleted_by")}),
        ("Important dates", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("username", "role", "branch", "password1", "password2")}),
    )
    list_display = ("username", "role", "branch", "is_active", "is_deleted")
    list_filter = ("role", "is_active", "is_deleted")
    search_fields = ("username", "email")
    ordering = ("username",)

    def get_queryset(self, request):
        return User.all_objects.select_related("branch")


@admin.register(Branch)
class BranchAdmin(admin.ModelAdmin):
    list_display = ("name", "location", "manager_name", "is_active", "is_deleted")
    list_filter = ("is_active", "is_deleted")
    search_fields = ("name", "location")

    def get_queryset(self, request):
        return Branch.all_objects.all()
