from django.contrib import admin

from .models import AccountPayable, AccountReceivable, Debt, DebtPayment, PayablePayment, ReceivablePayment


class PayablePaymentInline(admin.TabularInline):
    model = PayablePayment
    extra = 0
    raw_id_fields = ("transaction",)


class ReceivablePaymentInline(admin.TabularInline):
    model = ReceivablePayment
    extra = 0
    raw_id_fields = ("transaction",)


@admin.register(AccountPayable)
class AccountPayableAdmin(admin.ModelAdmin):
    list_display = ("id", "contact", "branch", "original_amount", "remaining_amount", "status", "due_date")
    list_filter = ("status", "branch", "is_deleted")
    search_fields = ("description", "invoice_number", "contact__name")
    raw_id_fields = ("contact", "linked_purchase_transaction")
    inlines = [PayablePaymentInline]

    def get_queryset(self, request):
        return AccountPayable.all_objects.select_related("contact", "branch")


@admin.register(AccountReceivable)
class AccountReceivableAdmin(admin.ModelAdmin):
    list_display = ("id", "contact", "branch", "original_amount", "remaining_amount", "status", "due_date")
    list_filter = ("status", "branch", "is_deleted")
    search_fields = ("description", "invoice_number", "contact__name")
    raw_id_fields = ("contact", "linked_sale_transaction")
    inlines = [ReceivablePaymentInline]

    def get_queryset(self, request):
        return AccountReceivable.all_objects.select_related("contact", "branch")


class DebtPaymentInline(admin.TabularInline):
    model = DebtPayment
    extra = 0


@admin.register(Debt)
class DebtAdmin(admin.ModelAdmin):
    list_display = ("creditor_name", "branch", "original_amount", "remaining_amount", "status", "date")
    list_filter = ("status", "branch")
    inlines = [DebtPaymentInline]
