from django.contrib import admin

from .models import Contact


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "branch", "phone", "is_active", "is_deleted")
    list_filter = ("type", "branch", "is_deleted")
    search_fields = ("name", "phone", "email")

    def get_queryset(self, request):
        return Contact.all_objects.select_related("branch")
