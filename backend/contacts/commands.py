# contacts/commands.py
"""
Commands for contacts.

Contacts are always written to a branch: accountants to their own,
admins to the branch they name.
"""

from django.db import transaction
from django.utils.translation import gettext as _

from accounts.authz import ActorContext, assert_branch_access, require, resolve_branch_for_write
from core.audit import EntityType, log_create, log_delete, log_update, snapshot
from core.commands import CommandResult

from .models import Contact
from .policies import can_delete_contact, name_taken

UPDATABLE_FIELDS = ("name", "type", "phone", "email", "address", "credit_limit", "notes", "is_active")


@transaction.atomic
def create_contact(actor: ActorContext, name: str, branch_id=None, **fields) -> CommandResult:
    require(actor, "contacts.manage")

    branch = resolve_branch_for_write(actor, branch_id)
    if name_taken(branch.pk, name):
        return CommandResult.conflict(_("A contact with this name already exists in the branch"))

    contact = Contact.objects.create(
        name=name,
        branch=branch,
        created_by=actor.user,
        **{k: v for k, v in fields.items() if k in UPDATABLE_FIELDS},
    )
    entry = log_create(actor, EntityType.CONTACT, contact)
    return CommandResult.ok(contact, event=entry)


@transaction.atomic
def update_contact(actor: ActorContext, contact_id: int, **updates) -> CommandResult:
    require(actor, "contacts.manage")

    contact = Contact.objects.filter(pk=contact_id).first()
    if contact is None:
        return CommandResult.not_found(_("Contact not found"))
    assert_branch_access(actor, contact)

    new_name = updates.get("name")
    if new_name and new_name != contact.name and name_taken(contact.branch_id, new_name, exclude_id=contact.pk):
        return CommandResult.conflict(_("A contact with this name already exists in the branch"))

    before = snapshot(contact)
    for field in UPDATABLE_FIELDS:
        if field in updates:
            setattr(contact, field, updates[field])
    contact.save()

    entry = log_update(actor, EntityType.CONTACT, contact, before)
    return CommandResult.ok(contact, event=entry)


@transaction.atomic
def delete_contact(actor: ActorContext, contact_id: int) -> CommandResult:
    require(actor, "contacts.manage")

    contact = Contact.objects.filter(pk=contact_id).first()
    if contact is None:
        return CommandResult.not_found(_("Contact not found"))
    assert_branch_access(actor, contact)

    allowed, reason = can_delete_contact(contact)
    if not allowed:
        return CommandResult.fail(reason)

    contact.soft_delete(actor.user)
    entry = log_delete(actor, EntityType.CONTACT, contact)
    return CommandResult.ok({"message": "Contact deleted"}, event=entry)

