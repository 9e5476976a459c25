# transactions/categories.py
"""
Transaction categories.

Categories are stored as English codes. The frontend may still send the
Arabic label of a category; normalize_category() maps it back to its code.
Unknown values are stored untouched, which keeps the free-text categories
used by payable/receivable payments working.
"""

INCOME_CATEGORIES = {
    "SALES": "مبيعات",
    "SERVICES": "خدمات",
    "APP_PURCHASES": "مشتريات التطبيق",
    "OTHER_INCOME": "إيرادات أخرى",
}

EXPENSE_CATEGORIES = {
    "WORKER_DAILY": "يوميات العمال",
    "RENT": "إيجار",
    "UTILITIES": "مرافق",
    "SUPPLIES": "مستلزمات",
    "MAINTENANCE": "صيانة",
    "TRANSPORTATION": "مواصلات",
    "INVENTORY": "مشتريات مخزون",
    "EMPLOYEE_SALARIES": "رواتب الموظفين",
    "OTHER_EXPENSE": "مصروفات أخرى",
}

CATEGORY_LABELS = {**INCOME_CATEGORIES, **EXPENSE_CATEGORIES}
_CODES_BY_LABEL = {label: code for code, label in CATEGORY_LABELS.items()}

DEFAULT_INCOME_CATEGORY = "OTHER_INCOME"
DEFAULT_EXPENSE_CATEGORY = "OTHER_EXPENSE"
SALARY_CATEGORY = "EMPLOYEE_SALARIES"

# Written by payable payments / receivable collections.
PAYABLE_PAYMENT_CATEGORY = "دفع حسابات دائنة"
RECEIVABLE_COLLECTION_CATEGORY = "تحصيل حسابات مدينة"

MULTI_ITEM_CATEGORIES = frozenset({"SALES", "APP_PURCHASES", "INVENTORY", "SUPPLIES"})
DISCOUNT_CATEGORIES = frozenset({"SALES", "SERVICES", "APP_PURCHASES"})


def normalize_category(category):
    if not category:
        return category
    category = category.strip()
    if category in CATEGORY_LABELS:
        return category
    return _CODES_BY_LABEL.get(category, category)


def category_label(code: str) -> str:
    return CATEGORY_LABELS.get(code, code)


def supports_multi_item(category) -> bool:
    return normalize_category(category) in MULTI_ITEM_CATEGORIES


def supports_discount(category) -> bool:
    return normalize_category(category) in DISCOUNT_CATEGORIES


def categories_for(transaction_type: str) -> list[dict]:
    source = INCOME_CATEGORIES if transaction_type == "INCOME" else EXPENSE_CATEGORIES
    return [{"code": code, "label": label} for code, label in source.items()]
