from django.contrib import admin

from .models import Employee, EmployeeAdjustment, SalaryIncrease, SalaryPayment


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("name", "position", "branch", "status", "base_salary", "allowance", "hire_date")
    list_filter = ("status", "branch")
    search_fields = ("name", "position")

    def get_queryset(self, request):
        return Employee.all_objects.select_related("branch")


@admin.register(SalaryPayment)
class SalaryPaymentAdmin(admin.ModelAdmin):
    list_display = ("employee", "salary_month", "amount", "payment_date", "is_deleted")
    list_filter = ("salary_month",)

    def get_queryset(self, request):
        return SalaryPayment.all_objects.select_related("employee")


@admin.register(SalaryIncrease)
class SalaryIncreaseAdmin(admin.ModelAdmin):
    list_display = ("employee", "old_salary", "new_salary", "effective_date")


@admin.register(EmployeeAdjustment)
class EmployeeAdjustmentAdmin(admin.ModelAdmin):
    list_display = ("employee", "type", "amount", "date", "status")
    list_filter = ("type", "status")
