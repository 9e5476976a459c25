# reports/catalog.py
"""
Data sources and the field catalogue of the smart report builder.

FIELD_CATALOG is what seed_report_fields writes into ReportFieldMetadata.
Field names are Django lookup paths on the source model, so related
columns such as "branch__name" can be reported and grouped on.
"""
from django.apps import apps


class DataSource:
    def __init__(self, key, label, model, branch_field=None):
        self.key = key
        self.label = label
        self.model_label = model
        # None for sources that are not branch scoped
        self.branch_field = branch_field

    @property
    def model(self):
        return apps.get_model(self.model_label)


DATA_SOURCES = {
    source.key: source
    for source in (
        DataSource("transactions", "المعاملات المالية", "transactions.Transaction", "branch"),
        DataSource("payables", "الحسابات الدائنة", "debts.AccountPayable", "branch"),
        DataSource("receivables", "الحسابات المدينة", "debts.AccountReceivable", "branch"),
        DataSource("inventory", "المخزون", "inventory.InventoryItem", "branch"),
        DataSource("salaries", "الرواتب", "employees.Employee", "branch"),
        DataSource("branches", "الفروع", "accounts.Branch"),
    )
}


def is_valid_data_source(value) -> bool:
    return value in DATA_SOURCES


def _field(source, name, display, data_type, order, *, filterable=True, sortable=True,
           aggregatable=False, groupable=False, visible=True, fmt="", enum=None):
    return {
        "data_source": source,
        "field_name": name,
        "display_name": display,
        "data_type": data_type,
        "filterable": filterable,
        "sortable": sortable,
        "aggregatable": aggregatable,
        "groupable": groupable,
        "default_visible": visible,
        "default_order": order,
        "format": fmt,
        "enum_values": enum,
    }


def _id(source):
    return _field(source, "id", "المعرف", "number", 999, filterable=False, sortable=False, visible=False)


_BALANCE_STATUS = ["ACTIVE", "PARTIAL", "PAID"]


def _balance_fields(source, contact_label):
    return [
        _id(source),
        _field(source, "contact__name", contact_label, "string", 1, groupable=True),
        _field(source, "original_amount", "المبلغ الأصلي", "number", 2, aggregatable=True, fmt="currency"),
        _field(source, "remaining_amount", "المبلغ المتبقي", "number", 3, aggregatable=True, fmt="currency"),
        _field(source, "status", "الحالة", "enum", 4, groupable=True, enum=_BALANCE_STATUS),
        _field(source, "date", "التاريخ", "date", 5, groupable=True, fmt="date-short"),
        _field(source, "due_date", "تاريخ الاستحقاق", "date", 6, fmt="date-short"),
        _field(source, "invoice_number", "رقم الفاتورة", "string", 7),
        _field(source, "description", "الوصف", "string", 8, sortable=False),
        _field(source, "branch__name", "الفرع", "string", 9, groupable=True),
        _field(source, "notes", "الملاحظات", "string", 10, sortable=False, visible=False),
    ]


FIELD_CATALOG = [
    # Transactions
    _id("transactions"),
    _field("transactions", "amount", "المبلغ", "number", 1, aggregatable=True, fmt="currency"),
    _field("transactions", "type", "النوع", "enum", 2, groupable=True, enum=["INCOME", "EXPENSE"]),
    _field("transactions", "category", "الفئة", "string", 3, groupable=True),
    _field("transactions", "payment_method", "طريقة الدفع", "enum", 4, groupable=True, enum=["CASH", "MASTER"]),
    _field("transactions", "currency", "العملة", "string", 5, groupable=True, visible=False),
    _field("transactions", "paid_amount", "المبلغ المدفوع", "number", 6, aggregatable=True, visible=False, fmt="currency"),
    _field("transactions", "contact__name", "جهة الاتصال", "string", 7, groupable=True, visible=False),
    _field("transactions", "branch__name", "الفرع", "string", 8, groupable=True),
    _field("transactions", "notes", "الملاحظات", "string", 9, sortable=False, visible=False),
    _field("transactions", "date", "التاريخ", "date", 10, groupable=True, fmt="date-short"),
    _field("transactions", "created_at", "تاريخ الإنشاء", "date", 11, visible=False, fmt="date-long"),

    # Payables / receivables
    *_balance_fields("payables", "المورد"),
    *_balance_fields("receivables", "العميل"),

    # Inventory
    _id("inventory"),
    _field("inventory", "name", "اسم الصنف", "string", 1),
    _field("inventory", "quantity", "الكمية", "number", 2, aggregatable=True),
    _field("inventory", "unit", "الوحدة", "enum", 3, groupable=True, enum=["KG", "PIECE", "LITER", "OTHER"]),
    _field("inventory", "cost_per_unit", "التكلفة لكل وحدة", "number", 4, aggregatable=True, fmt="currency"),
    _field("inventory", "selling_price", "سعر البيع", "number", 5, aggregatable=True, visible=False, fmt="currency"),
    _field("inventory", "branch__name", "الفرع", "string", 6, groupable=True),
    _field("inventory", "last_updated", "آخر تحديث", "date", 7, fmt="date-long"),

    # Employees
    _id("salaries"),
    _field("salaries", "name", "اسم الموظف", "string", 1),
    _field("salaries", "position", "المنصب", "string", 2, groupable=True),
    _field("salaries", "base_salary", "الراتب الأساسي", "number", 3, aggregatable=True, fmt="currency"),
    _field("salaries", "allowance", "البدل", "number", 4, aggregatable=True, fmt="currency"),
    _field("salaries", "status", "الحالة", "enum", 5, groupable=True, enum=["ACTIVE", "RESIGNED"]),
    _field("salaries", "hire_date", "تاريخ التوظيف", "date", 6, fmt="date-short"),
    _field("salaries", "branch__name", "الفرع", "string", 7, groupable=True),

    # Branches
    _id("branches"),
    _field("branches", "name", "اسم الفرع", "string", 1),
    _field("branches", "location", "الموقع", "string", 2, sortable=False),
    _field("branches", "manager_name", "اسم المدير", "string", 3),
    _field("branches", "phone", "الهاتف", "string", 4, sortable=False),
    _field("branches", "is_active", "نشط", "boolean", 5, groupable=True),
]
