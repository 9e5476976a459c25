from django.utils.translation import gettext as _
from rest_framework import serializers

from accounts.serializers import BranchBriefSerializer

from .models import InventoryConsumption, InventoryItem, InventorySubUnit, InventoryUnit


class InventorySubUnitSerializer(serializers.ModelSerializer):
    class Meta:
        model = InventorySubUnit
        fields = ("id", "inventory_item", "unit_name", "ratio", "selling_price", "created_at", "updated_at")
        read_only_fields = fields


class InventoryItemSerializer(serializers.ModelSerializer):
    branch = BranchBriefSerializer(read_only=True)
    sub_units = InventorySubUnitSerializer(many=True, read_only=True)
    stock_value = serializers.DecimalField(max_digits=20, decimal_places=2, read_only=True)

    class Meta:
        model = InventoryItem
        fields = (
            "id", "branch_id", "branch", "name", "quantity", "unit", "cost_per_unit",
            "selling_price", "allow_sub_units", "include_in_revenue", "stock_value",
            "sub_units", "last_updated", "created_at",
        )
        read_only_fields = fields


class InventoryItemCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=0)
    unit = serializers.ChoiceField(choices=InventoryUnit.choices)
    cost_per_unit = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=0)
    selling_price = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=0, required=False, allow_null=True)
    allow_sub_units = serializers.BooleanField(required=False, default=False)
    include_in_revenue = serializers.BooleanField(required=False, default=True)
    branch_id = serializers.IntegerField(required=False, allow_null=True)


class InventoryItemUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, required=False)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=0, required=False)
    unit = serializers.ChoiceField(choices=InventoryUnit.choices, required=False)
    cost_per_unit = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=0, required=False)
    selling_price = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=0, required=False, allow_null=True)
    allow_sub_units = serializers.BooleanField(required=False)
    include_in_revenue = serializers.BooleanField(required=False)


class SubUnitCreateSerializer(serializers.Serializer):
    inventory_item_id = serializers.IntegerField()
    unit_name = serializers.CharField(max_length=50)
    ratio = serializers.DecimalField(max_digits=12, decimal_places=3)
    selling_price = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=0)

    def validate_ratio(self, value):
        if value <= 0:
            raise serializers.ValidationError(_("Ratio must be greater than 0."))
        return value


class SubUnitUpdateSerializer(serializers.Serializer):
    inventory_item_id = serializers.IntegerField(required=False)
    unit_name = serializers.CharField(max_length=50, required=False)
    ratio = serializers.DecimalField(max_digits=12, decimal_places=3, required=False)
    selling_price = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=0, required=False)

    def validate_ratio(self, value):
        if value <= 0:
            raise serializers.ValidationError(_("Ratio must be greater than 0."))
        return value


class ConsumptionSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source="inventory_item.name", read_only=True)
    recorded_by_username = serializers.CharField(source="recorded_by.username", read_only=True, default=None)

    class Meta:
        model = InventoryConsumption
        fields = (
            "id", "inventory_item", "item_name", "branch", "quantity", "unit", "reason",
            "consumed_at", "recorded_by", "recorded_by_username", "created_at",
        )
        read_only_fields = fields


class RecordConsumptionSerializer(serializers.Serializer):
    inventory_item_id = serializers.IntegerField()
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3)
    unit = serializers.ChoiceField(choices=InventoryUnit.choices)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    consumed_at = serializers.DateTimeField(required=False)

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError(_("Quantity must be greater than 0."))
        return value
