"""
Fixed export definitions: transactions, payables and inventory.

Each export is a column list plus a prepare_* function turning a queryset
into rows; core.exports renders them as xlsx, csv or txt.
"""
import re
from decimal import Decimal

from transactions.categories import category_label

from .query_builder import visible_fields

# =============================================================================
# Transactions
# =============================================================================

TRANSACTION_EXPORT_COLUMNS = [
    {'key': 'date', 'header': 'التاريخ', 'width': 12},
    {'key': 'type', 'header': 'النوع', 'width': 10},
    {'key': 'category', 'header': 'الفئة', 'width': 20},
    {'key': 'amount', 'header': 'المبلغ', 'width': 14, 'numeric': True},
    {'key': 'currency', 'header': 'العملة', 'width': 8},
    {'key': 'payment_method', 'header': 'طريقة الدفع', 'width': 12},
    {'key': 'contact', 'header': 'جهة الاتصال', 'width': 20},
    {'key': 'branch', 'header': 'الفرع', 'width': 18},
    {'key': 'notes', 'header': 'الملاحظات', 'width': 30},
    {'key': 'created_by', 'header': 'أنشئ بواسطة', 'width': 15},
]

_TYPE_LABELS = {'INCOME': 'دخل', 'EXPENSE': 'مصروف'}


def prepare_transaction_export_data(transactions) -> list[dict]:
    data = []
    for txn in transactions:
        data.append({
            'date': txn.date,
            'type': _TYPE_LABELS.get(txn.type, txn.type),
            'category': category_label(txn.category),
            'amount': txn.amount,
            'currency': txn.currency,
            'payment_method': txn.payment_method or '',
            'contact': txn.contact.name if txn.contact_id else '',
            'branch': txn.branch.name,
            'notes': txn.notes,
            'created_by': txn.created_by.username if txn.created_by_id else '',
        })
    return data


# =============================================================================
# Payables
# =============================================================================

PAYABLE_EXPORT_COLUMNS = [
    {'key': 'contact', 'header': 'المورد', 'width': 22},
    {'key': 'original_amount', 'header': 'المبلغ الأصلي', 'width': 14, 'numeric': True},
    {'key': 'paid_amount', 'header': 'المدفوع', 'width': 14, 'numeric': True},
    {'key': 'remaining_amount', 'header': 'المتبقي', 'width': 14, 'numeric': True},
    {'key': 'status', 'header': 'الحالة', 'width': 10},
    {'key': 'date', 'header': 'التاريخ', 'width': 12},
    {'key': 'due_date', 'header': 'تاريخ الاستحقاق', 'width': 14},
    {'key': 'invoice_number', 'header': 'رقم الفاتورة', 'width': 14},
    {'key': 'description', 'header': 'الوصف', 'width': 30},
    {'key': 'branch', 'header': 'الفرع', 'width': 18},
]

_STATUS_LABELS = {'ACTIVE': 'نشط', 'PARTIAL': 'جزئي', 'PAID': 'مدفوع'}


def prepare_payable_export_data(payables) -> list[dict]:
    data = []
    for payable in payables:
        data.append({
            'contact': payable.contact.name,
            'original_amount': payable.original_amount,
            'paid_amount': payable.paid_amount,
            'remaining_amount': payable.remaining_amount,
            'status': _STATUS_LABELS.get(payable.status, payable.status),
            'date': payable.date,
            'due_date': payable.due_date,
            'invoice_number': payable.invoice_number,
            'description': payable.description,
            'branch': payable.branch.name if payable.branch_id else '',
        })
    return data


# =============================================================================
# Inventory
# =============================================================================

INVENTORY_EXPORT_COLUMNS = [
    {'key': 'name', 'header': 'اسم الصنف', 'width': 24},
    {'key': 'quantity', 'header': 'الكمية', 'width': 10, 'numeric': True},
    {'key': 'unit', 'header': 'الوحدة', 'width': 8},
    {'key': 'cost_per_unit', 'header': 'التكلفة لكل وحدة', 'width': 14, 'numeric': True},
    {'key': 'total_value', 'header': 'القيمة الإجمالية', 'width': 14, 'numeric': True},
    {'key': 'selling_price', 'header': 'سعر البيع', 'width': 12, 'numeric': True},
    {'key': 'branch', 'header': 'الفرع', 'width': 18},
    {'key': 'last_updated', 'header': 'آخر تحديث', 'width': 18},
]


def prepare_inventory_export_data(items) -> list[dict]:
    data = []
    for item in items:
        data.append({
            'name': item.name,
            'quantity': item.quantity,
            'unit': item.unit,
            'cost_per_unit': item.cost_per_unit,
            'total_value': (item.quantity * item.cost_per_unit).quantize(Decimal('0.01')),
            'selling_price': item.selling_price,
            'branch': item.branch.name,
            'last_updated': item.last_updated,
        })
    return data


# =============================================================================
# Smart reports
# =============================================================================

def report_columns(fields) -> list[dict]:
    """Export columns for the visible fields of a report configuration."""
    return [
        {'key': f['sourceField'], 'header': f['displayName'], 'width': f.get('width') or 20}
        for f in visible_fields(fields)
    ]


def sanitize_filename(name, fallback: str) -> str:
    """Strip path separators, control and reserved characters from a download name."""
    if not name:
        return fallback
    cleaned = re.sub(r'[\\/]', '_', str(name))
    cleaned = cleaned.replace('..', '_')
    cleaned = re.sub(r'[\x00-\x1f\x7f]', '', cleaned)
    cleaned = re.sub(r'[<>:"|?*]', '_', cleaned)
    cleaned = cleaned.lstrip('.').strip()[:200]
    return cleaned or fallback
