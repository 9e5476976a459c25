from rest_framework import serializers

from accounts.serializers import BranchBriefSerializer

from .models import Employee, EmployeeAdjustment, SalaryIncrease, SalaryPayment


class EmployeeSerializer(serializers.ModelSerializer):
    branch = BranchBriefSerializer(read_only=True)
    gross_salary = serializers.DecimalField(max_digits=16, decimal_places=2, read_only=True)

    class Meta:
        model = Employee
        fields = (
            "id", "name", "position", "status", "base_salary", "allowance", "gross_salary",
            "hire_date", "resign_date", "notes", "branch_id", "branch", "created_by",
            "created_at", "updated_at",
        )
        read_only_fields = fields


class SalaryPaymentSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.name", read_only=True)

    class Meta:
        model = SalaryPayment
        fields = (
            "id", "employee", "employee_name", "amount", "payment_date", "salary_month",
            "notes", "transaction", "recorded_by", "created_at",
        )
        read_only_fields = fields


class SalaryIncreaseSerializer(serializers.ModelSerializer):
    class Meta:
        model = SalaryIncrease
        fields = (
            "id", "employee", "old_salary", "new_salary", "increase_amount",
            "effective_date", "reason", "recorded_by", "created_at",
        )
        read_only_fields = fields


class EmployeeAdjustmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = EmployeeAdjustment
        fields = (
            "id", "employee", "type", "amount", "date", "description", "status",
            "salary_payment", "transaction", "created_by", "created_at",
        )
        read_only_fields = fields


class SalaryDetailsSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    employee_name = serializers.CharField()
    month = serializers.CharField()
    base_salary = serializers.DecimalField(max_digits=15, decimal_places=2)
    allowance = serializers.DecimalField(max_digits=15, decimal_places=2)
    gross_salary = serializers.DecimalField(max_digits=16, decimal_places=2)
    total_bonuses = serializers.DecimalField(max_digits=16, decimal_places=2)
    total_deductions = serializers.DecimalField(max_digits=16, decimal_places=2)
    total_advances = serializers.DecimalField(max_digits=16, decimal_places=2)
    net_salary = serializers.DecimalField(max_digits=16, decimal_places=2)
    adjustments = EmployeeAdjustmentSerializer(many=True)
    is_paid = serializers.BooleanField()


# =============================================================================
# Input
# =============================================================================

class EmployeeCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    position = serializers.CharField(max_length=150)
    base_salary = serializers.DecimalField(max_digits=15, decimal_places=2)
    allowance = serializers.DecimalField(max_digits=15, decimal_places=2, required=False, default=0)
    hire_date = serializers.DateField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    branch_id = serializers.IntegerField(required=False, allow_null=True)


class EmployeeUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, required=False)
    position = serializers.CharField(max_length=150, required=False)
    base_salary = serializers.DecimalField(max_digits=15, decimal_places=2, required=False)
    allowance = serializers.DecimalField(max_digits=15, decimal_places=2, required=False)
    hire_date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class ResignSerializer(serializers.Serializer):
    resign_date = serializers.DateField(required=False)


class SalaryIncreaseCreateSerializer(serializers.Serializer):
    new_salary = serializers.DecimalField(max_digits=15, decimal_places=2)
    effective_date = serializers.DateField(required=False)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class AdjustmentCreateSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=EmployeeAdjustment.AdjustmentType.choices)
    amount = serializers.DecimalField(max_digits=15, decimal_places=2)
    date = serializers.DateField(required=False)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class PaySalarySerializer(serializers.Serializer):
    salary_month = serializers.RegexField(r"^\d{4}-(0[1-9]|1[0-2])$", error_messages={
        "invalid": "Salary month must be in YYYY-MM format.",
    })
    payment_date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
