# inventory/commands.py
"""
Commands for inventory items, sub-units and consumption.

Stock arithmetic lives in inventory.stock so that transaction creation
moves stock exactly the way a manual consumption does.
"""

import logging

from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext as _

from accounts.authz import ActorContext, assert_branch_access, require, resolve_branch_for_write
from core.audit import EntityType, log_action, log_create, log_delete, log_update, snapshot
from core.commands import CommandResult
from core.models import AuditLog

from . import stock
from .models import InventoryItem, InventorySubUnit
from .policies import can_delete_item, item_exists, sub_unit_name_taken

logger = logging.getLogger(__name__)

ITEM_FIELDS = ("name", "quantity", "unit", "cost_per_unit", "selling_price", "allow_sub_units", "include_in_revenue")


# =============================================================================
# Items
# =============================================================================

@transaction.atomic
def create_item(actor: ActorContext, name: str, unit: str, quantity, cost_per_unit, branch_id=None, **fields) -> CommandResult:
    require(actor, "inventory.manage")

    branch = resolve_branch_for_write(actor, branch_id)
    if quantity < 0:
        return CommandResult.fail(_("Quantity must be greater than or equal to 0"))
    if cost_per_unit < 0:
        return CommandResult.fail(_("Cost per unit must be greater than or equal to 0"))
    if item_exists(branch.pk, name, unit):
        return CommandResult.conflict(_("An inventory item with the same name and unit already exists in this branch"))

    item = InventoryItem.objects.create(
        branch=branch,
        name=name,
        unit=unit,
        quantity=quantity,
        cost_per_unit=cost_per_unit,
        last_updated=timezone.now(),
        **{k: v for k, v in fields.items() if k in ITEM_FIELDS},
    )
    entry = log_create(actor, EntityType.INVENTORY_ITEM, item)
    return CommandResult.ok(item, event=entry)


@transaction.atomic
def update_item(actor: ActorContext, item_id: int, **updates) -> CommandResult:
    require(actor, "inventory.manage")

    item = stock.lock_item(item_id)
    if item is None:
        return CommandResult.not_found(_("Inventory item not found"))
    assert_branch_access(actor, item)

    if updates.get("quantity") is not None and updates["quantity"] < 0:
        return CommandResult.fail(_("Quantity must be greater than or equal to 0"))
    if updates.get("cost_per_unit") is not None and updates["cost_per_unit"] < 0:
        return CommandResult.fail(_("Cost per unit must be greater than or equal to 0"))

    name = updates.get("name", item.name)
    unit = updates.get("unit", item.unit)
    if (name, unit) != (item.name, item.unit) and item_exists(item.branch_id, name, unit, exclude_id=item.pk):
        return CommandResult.conflict(_("An inventory item with the same name and unit already exists in this branch"))

    before = snapshot(item)
    for field in ITEM_FIELDS:
        if field in updates:
            setattr(item, field, updates[field])
    item.last_updated = timezone.now()
    item.save()

    entry = log_update(actor, EntityType.INVENTORY_ITEM, item, before)
    return CommandResult.ok(item, event=entry)


@transaction.atomic
def delete_item(actor: ActorContext, item_id: int) -> CommandResult:
    require(actor, "inventory.manage")

    item = InventoryItem.objects.filter(pk=item_id).first()
    if item is None:
        return CommandResult.not_found(_("Inventory item not found"))
    assert_branch_access(actor, item)

    allowed, reason = can_delete_item(item)
    if not allowed:
        return CommandResult.fail(reason)

    item.soft_delete(actor.user)
    entry = log_delete(actor, EntityType.INVENTORY_ITEM, item)
    return CommandResult.ok({"message": "Inventory item deleted successfully", "id": item.pk}, event=entry)


# =============================================================================
# Consumption
# =============================================================================

@transaction.atomic
def record_consumption(
    actor: ActorContext,
    inventory_item_id: int,
    quantity,
    unit: str,
    reason: str = "",
    consumed_at=None,
) -> CommandResult:
    """Take stock out of an item outside of any sale or expense."""
    require(actor, "inventory.manage")

    item = stock.lock_item(inventory_item_id)
    if item is None:
        return CommandResult.not_found(_("Inventory item not found"))
    assert_branch_access(actor, item)

    if item.unit != unit:
        return CommandResult.fail(
            _("Unit mismatch: inventory item uses %(expected)s, but %(given)s was provided")
            % {"expected": item.unit, "given": unit}
        )

    previous_quantity = item.quantity
    try:
        consumption = stock.consume(item, quantity, actor.user, reason=reason, consumed_at=consumed_at)
    except stock.InsufficientStock as exc:
        return CommandResult.fail(str(exc))

    entry = log_action(actor, AuditLog.Action.CREATE, EntityType.INVENTORY_CONSUMPTION, consumption.pk, {
        "inventory_item_id": item.pk,
        "item_name": item.name,
        "quantity_consumed": quantity,
        "unit": unit,
        "reason": reason,
        "previous_quantity": previous_quantity,
        "new_quantity": item.quantity,
    })
    logger.info(
        "Inventory consumed",
        extra={"item_id": item.pk, "quantity": str(quantity), "branch_id": item.branch_id},
    )
    return CommandResult.ok(consumption, event=entry)


# =============================================================================
# Sub-units
# =============================================================================

@transaction.atomic
def create_sub_unit(actor: ActorContext, inventory_item_id: int, unit_name: str, ratio, selling_price) -> CommandResult:
    require(actor, "inventory.manage")

    item = InventoryItem.objects.filter(pk=inventory_item_id).first()
    if item is None:
        return CommandResult.not_found(_("Inventory item not found"))
    assert_branch_access(actor, item)

    if ratio <= 0:
        return CommandResult.fail(_("Ratio must be greater than 0"))
    if sub_unit_name_taken(item.pk, unit_name):
        return CommandResult.conflict(_("Sub-unit with this name already exists for this inventory item"))

    sub_unit = InventorySubUnit.objects.create(
        inventory_item=item,
        unit_name=unit_name,
        ratio=ratio,
        selling_price=selling_price,
    )
    entry = log_create(actor, EntityType.INVENTORY_SUB_UNIT, sub_unit)
    return CommandResult.ok(sub_unit, event=entry)


@transaction.atomic
def update_sub_unit(actor: ActorContext, sub_unit_id: int, **updates) -> CommandResult:
    require(actor, "inventory.manage")

    sub_unit = InventorySubUnit.objects.select_related("inventory_item").filter(pk=sub_unit_id).first()
    if sub_unit is None:
        return CommandResult.not_found(_("Inventory sub-unit not found"))
    assert_branch_access(actor, sub_unit.inventory_item)

    new_item_id = updates.get("inventory_item_id")
    if new_item_id is not None and new_item_id != sub_unit.inventory_item_id:
        return CommandResult.fail(_("Cannot change inventory item for a sub-unit after creation"))

    new_name = updates.get("unit_name")
    if new_name and new_name != sub_unit.unit_name and sub_unit_name_taken(
        sub_unit.inventory_item_id, new_name, exclude_id=sub_unit.pk,
    ):
        return CommandResult.conflict(_("Sub-unit with this name already exists for this inventory item"))

    before = snapshot(sub_unit)
    for field in ("unit_name", "ratio", "selling_price"):
        if field in updates:
            setattr(sub_unit, field, updates[field])
    sub_unit.save()

    entry = log_update(actor, EntityType.INVENTORY_SUB_UNIT, sub_unit, before)
    return CommandResult.ok(sub_unit, event=entry)


@transaction.atomic
def delete_sub_unit(actor: ActorContext, sub_unit_id: int) -> CommandResult:
    require(actor, "inventory.manage")

    sub_unit = InventorySubUnit.objects.select_related("inventory_item").filter(pk=sub_unit_id).first()
    if sub_unit is None:
        return CommandResult.not_found(_("Inventory sub-unit not found"))
    assert_branch_access(actor, sub_unit.inventory_item)

    entry = log_delete(actor, EntityType.INVENTORY_SUB_UNIT, sub_unit)
    sub_unit.delete()
    return CommandResult.ok({"message": "Sub-unit deleted"}, event=entry)
