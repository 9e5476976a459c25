from rest_framework import serializers

from accounts.serializers import BranchBriefSerializer

from .models import (
    AccountPayable,
    AccountReceivable,
    Debt,
    DebtPayment,
    DebtStatus,
    PayablePayment,
    PaymentMethod,
    ReceivablePayment,
)


class ContactBriefField(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    type = serializers.CharField()
    phone = serializers.CharField()


# =============================================================================
# Output
# =============================================================================

class PayablePaymentSerializer(serializers.ModelSerializer):
    recorded_by_username = serializers.CharField(source="recorded_by.username", read_only=True, default=None)

    class Meta:
        model = PayablePayment
        fields = (
            "id", "payable", "amount_paid", "payment_date", "payment_method", "notes",
            "transaction", "recorded_by", "recorded_by_username", "created_at",
        )
        read_only_fields = fields


class ReceivablePaymentSerializer(serializers.ModelSerializer):
    recorded_by_username = serializers.CharField(source="recorded_by.username", read_only=True, default=None)

    class Meta:
        model = ReceivablePayment
        fields = (
            "id", "receivable", "amount_paid", "payment_date", "payment_method", "notes",
            "transaction", "recorded_by", "recorded_by_username", "created_at",
        )
        read_only_fields = fields


_BALANCE_FIELDS = (
    "id", "contact_id", "contact", "branch_id", "branch", "original_amount", "remaining_amount",
    "paid_amount", "date", "due_date", "status", "is_overdue", "description", "invoice_number",
    "notes", "created_by", "created_at", "updated_at",
)


class AccountPayableSerializer(serializers.ModelSerializer):
    contact = ContactBriefField(read_only=True)
    branch = BranchBriefSerializer(read_only=True)
    paid_amount = serializers.DecimalField(max_digits=15, decimal_places=2, read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = AccountPayable
        fields = _BALANCE_FIELDS + ("linked_purchase_transaction",)
        read_only_fields = fields


class AccountPayableDetailSerializer(AccountPayableSerializer):
    payments = PayablePaymentSerializer(many=True, read_only=True)

    class Meta(AccountPayableSerializer.Meta):
        fields = AccountPayableSerializer.Meta.fields + ("payments",)
        read_only_fields = fields


class AccountReceivableSerializer(serializers.ModelSerializer):
    contact = ContactBriefField(read_only=True)
    branch = BranchBriefSerializer(read_only=True)
    paid_amount = serializers.DecimalField(max_digits=15, decimal_places=2, read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = AccountReceivable
        fields = _BALANCE_FIELDS + ("linked_sale_transaction",)
        read_only_fields = fields


class AccountReceivableDetailSerializer(AccountReceivableSerializer):
    payments = ReceivablePaymentSerializer(many=True, read_only=True)

    class Meta(AccountReceivableSerializer.Meta):
        fields = AccountReceivableSerializer.Meta.fields + ("payments",)
        read_only_fields = fields


class DebtPaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = DebtPayment
        fields = ("id", "debt", "amount_paid", "payment_date", "notes", "recorded_by", "created_at")
        read_only_fields = fields


class DebtSerializer(serializers.ModelSerializer):
    branch = BranchBriefSerializer(read_only=True)
    payments = DebtPaymentSerializer(many=True, read_only=True)

    class Meta:
        model = Debt
        fields = (
            "id", "creditor_name", "branch_id", "branch", "original_amount", "remaining_amount",
            "date", "due_date", "status", "notes", "payments", "created_by", "created_at", "updated_at",
        )
        read_only_fields = fields


# =============================================================================
# Input
# =============================================================================

class BalanceCreateSerializer(serializers.Serializer):
    contact_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=15, decimal_places=2)
    date = serializers.DateField(required=False)
    due_date = serializers.DateField(required=False, allow_null=True)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    invoice_number = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    branch_id = serializers.IntegerField(required=False, allow_null=True)
    linked_transaction_id = serializers.IntegerField(required=False, allow_null=True)


class BalanceUpdateSerializer(serializers.Serializer):
    # amount and contact_id are accepted only to be refused with a clear message
    amount = serializers.DecimalField(max_digits=15, decimal_places=2, required=False)
    contact_id = serializers.IntegerField(required=False)
    date = serializers.DateField(required=False)
    due_date = serializers.DateField(required=False, allow_null=True)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)
    invoice_number = serializers.CharField(max_length=100, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=DebtStatus.choices, required=False)


class BalancePaymentSerializer(serializers.Serializer):
    amount_paid = serializers.DecimalField(max_digits=15, decimal_places=2)
    payment_date = serializers.DateField(required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class BalanceFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=DebtStatus.choices, required=False)
    contact = serializers.IntegerField(required=False)
    branch = serializers.IntegerField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    search = serializers.CharField(required=False)


class DebtCreateSerializer(serializers.Serializer):
    creditor_name = serializers.CharField(max_length=200)
    amount = serializers.DecimalField(max_digits=15, decimal_places=2)
    date = serializers.DateField(required=False)
    due_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    branch_id = serializers.IntegerField(required=False, allow_null=True)


class DebtPaymentCreateSerializer(serializers.Serializer):
    amount_paid = serializers.DecimalField(max_digits=15, decimal_places=2)
    payment_date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
