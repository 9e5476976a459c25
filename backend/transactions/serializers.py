from django.utils.translation import gettext as _
from rest_framework import serializers

from accounts.serializers import BranchBriefSerializer

from .categories import category_label
from .models import Currency, DiscountReason, DiscountType, PaymentMethod, Transaction, TransactionInventoryItem


# =============================================================================
# Output
# =============================================================================

class TransactionInventoryItemSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source="inventory_item.name", read_only=True)
    unit = serializers.CharField(source="inventory_item.unit", read_only=True)

    class Meta:
        model = TransactionInventoryItem
        fields = (
            "id", "inventory_item", "item_name", "unit", "quantity", "operation_type",
            "unit_price", "subtotal", "discount_type", "discount_value", "total", "notes",
        )
        read_only_fields = fields


class TransactionSerializer(serializers.ModelSerializer):
    branch = BranchBriefSerializer(read_only=True)
    category_label = serializers.SerializerMethodField()
    created_by_username = serializers.CharField(source="created_by.username", read_only=True, default=None)
    contact_name = serializers.CharField(source="contact.name", read_only=True, default=None)
    employee_name = serializers.CharField(source="employee.name", read_only=True, default=None)
    inventory_items = TransactionInventoryItemSerializer(many=True, read_only=True)

    class Meta:
        model = Transaction
        fields = (
            "id", "type", "amount", "currency", "payment_method", "category", "category_label",
            "date", "notes", "total_amount", "paid_amount", "subtotal", "discount_type",
            "discount_value", "discount_reason", "branch_id", "branch", "contact_id", "contact_name",
            "linked_payable_id", "linked_receivable_id", "employee_id", "employee_name",
            "inventory_items", "created_by", "created_by_username", "created_at", "updated_at",
        )
        read_only_fields = fields

    def get_category_label(self, obj):
        return category_label(obj.category)


class DiscountReasonSerializer(serializers.ModelSerializer):
    class Meta:
        model = DiscountReason
        fields = ("id", "reason", "description", "is_default", "sort_order", "created_at", "updated_at")
        read_only_fields = fields


# =============================================================================
# Input
# =============================================================================

class TransactionItemInputSerializer(serializers.Serializer):
    inventory_item_id = serializers.IntegerField()
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3)
    operation_type = serializers.ChoiceField(
        choices=TransactionInventoryItem.OperationType.choices,
        default=TransactionInventoryItem.OperationType.CONSUMPTION,
    )
    unit_price = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=0)
    discount_type = serializers.ChoiceField(choices=DiscountType.choices, required=False, allow_null=True)
    discount_value = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=0, required=False, allow_null=True)
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError(_("Quantity must be greater than 0."))
        return value


class _TransactionCreateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=15, decimal_places=2, required=False, allow_null=True)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    currency = serializers.ChoiceField(choices=Currency.choices, required=False)
    branch_id = serializers.IntegerField(required=False, allow_null=True)
    items = TransactionItemInputSerializer(many=True, required=False)
    paid_amount = serializers.DecimalField(max_digits=15, decimal_places=2, required=False, allow_null=True)
    contact_id = serializers.IntegerField(required=False, allow_null=True)


class IncomeCreateSerializer(_TransactionCreateSerializer):
    discount_type = serializers.ChoiceField(choices=DiscountType.choices, required=False, allow_null=True)
    discount_value = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=0, required=False, allow_null=True)
    discount_reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    receivable_due_date = serializers.DateField(required=False, allow_null=True)


class ExpenseCreateSerializer(_TransactionCreateSerializer):
    payable_due_date = serializers.DateField(required=False, allow_null=True)
    employee_id = serializers.IntegerField(required=False, allow_null=True)


class TransactionItemUpdateSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, required=False)
    unit_price = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=0, required=False)

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError(_("Quantity must be greater than 0."))
        return value


class TransactionUpdateSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=Transaction._meta.get_field("type").choices, required=False)
    amount = serializers.DecimalField(max_digits=15, decimal_places=2, required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False, allow_null=True)
    category = serializers.CharField(max_length=100, required=False)
    date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    currency = serializers.ChoiceField(choices=Currency.choices, required=False)
    discount_type = serializers.ChoiceField(choices=DiscountType.choices, required=False, allow_null=True)
    discount_value = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=0, required=False, allow_null=True)
    discount_reason = serializers.CharField(max_length=255, required=False, allow_blank=True)
    items = TransactionItemUpdateSerializer(many=True, required=False)


class TransactionFilterSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=Transaction._meta.get_field("type").choices, required=False)
    branch = serializers.IntegerField(required=False)
    category = serializers.CharField(required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    search = serializers.CharField(required=False)
    employee = serializers.IntegerField(required=False)


class DiscountReasonWriteSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=100)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    is_default = serializers.BooleanField(required=False, default=False)
    sort_order = serializers.IntegerField(required=False, default=0)


class DiscountReasonUpdateSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=100, required=False)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)
    is_default = serializers.BooleanField(required=False)
    sort_order = serializers.IntegerField(required=False)
