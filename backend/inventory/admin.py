from django.contrib import admin

from .models import InventoryConsumption, InventoryItem, InventorySubUnit


class InventorySubUnitInline(admin.TabularInline):
    model = InventorySubUnit
    extra = 0


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ("name", "branch", "quantity", "unit", "cost_per_unit", "is_deleted")
    list_filter = ("unit", "branch", "is_deleted")
    search_fields = ("name",)
    inlines = [InventorySubUnitInline]

    def get_queryset(self, request):
        return InventoryItem.all_objects.select_related("branch")


@admin.register(InventoryConsumption)
class InventoryConsumptionAdmin(admin.ModelAdmin):
    list_display = ("inventory_item", "branch", "quantity", "unit", "reason", "consumed_at")
    list_filter = ("branch",)
