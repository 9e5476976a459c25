# inventory/policies.py
from .models import InventoryItem, InventorySubUnit


def item_exists(branch_id, name: str, unit: str, exclude_id=None) -> bool:
    qs = InventoryItem.objects.filter(branch_id=branch_id, name=name, unit=unit)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.exists()


def can_delete_item(item: InventoryItem) -> tuple[bool, str]:
    if item.transaction_links.exists():
        return False, (
            "Cannot delete inventory item with linked transactions. "
            "Unlink transactions first or set quantity to 0."
        )
    return True, ""


def sub_unit_name_taken(item_id, unit_name: str, exclude_id=None) -> bool:
    qs = InventorySubUnit.objects.filter(inventory_item_id=item_id, unit_name=unit_name)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.exists()
