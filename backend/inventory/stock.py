# inventory/stock.py
"""
Stock movements shared by inventory commands and transaction creation.

Callers must hold a transaction; items are locked with select_for_update.
"""

from decimal import Decimal

from django.utils import timezone
from django.utils.translation import gettext as _

from .models import InventoryConsumption, InventoryItem

COST_Q = Decimal("0.01")


class InsufficientStock(Exception):
    def __init__(self, item: InventoryItem, requested):
        self.item = item
        self.requested = requested
        super().__init__(
            _("Insufficient inventory for %(name)s: available %(available)s %(unit)s, requested %(requested)s %(unit)s")
            % {"name": item.name, "available": item.quantity, "requested": requested, "unit": item.unit}
        )


def lock_item(item_id, branch_id=None):
    qs = InventoryItem.objects.select_for_update().filter(pk=item_id)
    if branch_id is not None:
        qs = qs.filter(branch_id=branch_id)
    return qs.first()


def weighted_average_cost(quantity, cost, incoming_quantity, incoming_price) -> Decimal:
    """(q*c + iq*ip) / (q + iq), rounded to cents. Falls back to the incoming price when nothing is held."""
    quantity = Decimal(quantity)
    incoming_quantity = Decimal(incoming_quantity)
    total_quantity = quantity + incoming_quantity
    if total_quantity <= 0:
        return Decimal(incoming_price).quantize(COST_Q)
    total_value = quantity * Decimal(cost) + incoming_quantity * Decimal(incoming_price)
    return (total_value / total_quantity).quantize(COST_Q)


def consume(item: InventoryItem, quantity, user, reason: str = "", consumed_at=None) -> InventoryConsumption:
    """Decrement stock and write the consumption record."""
    quantity = Decimal(quantity)
    if item.quantity < quantity:
        raise InsufficientStock(item, quantity)

    item.quantity = item.quantity - quantity
    item.last_updated = timezone.now()
    item.save(update_fields=["quantity", "last_updated"])

    return InventoryConsumption.objects.create(
        inventory_item=item,
        branch_id=item.branch_id,
        quantity=quantity,
        unit=item.unit,
        reason=reason,
        consumed_at=consumed_at or timezone.now(),
        recorded_by=user,
    )


def receive(item: InventoryItem, quantity, unit_price) -> InventoryItem:
    """Increment stock and re-average the unit cost."""
    quantity = Decimal(quantity)
    item.cost_per_unit = weighted_average_cost(item.quantity, item.cost_per_unit, quantity, unit_price)
    item.quantity = item.quantity + quantity
    item.last_updated = timezone.now()
    item.save(update_fields=["quantity", "cost_per_unit", "last_updated"])
    return item
