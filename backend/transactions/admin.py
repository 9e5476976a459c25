from django.contrib import admin

from .models import DiscountReason, Transaction, TransactionInventoryItem


class TransactionInventoryItemInline(admin.TabularInline):
    model = TransactionInventoryItem
    extra = 0
    raw_id_fields = ("inventory_item",)


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ("id", "type", "amount", "category", "payment_method", "branch", "date", "is_deleted")
    list_filter = ("type", "payment_method", "branch", "is_deleted")
    search_fields = ("category", "notes")
    date_hierarchy = "date"
    raw_id_fields = ("contact", "employee", "linked_payable", "linked_receivable")
    inlines = [TransactionInventoryItemInline]

    def get_queryset(self, request):
        return Transaction.all_objects.select_related("branch")


@admin.register(DiscountReason)
class DiscountReasonAdmin(admin.ModelAdmin):
    list_display = ("reason", "is_default", "sort_order", "is_deleted")
