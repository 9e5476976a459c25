# contacts/policies.py
from django.utils.translation import gettext as _

from .models import Contact


def name_taken(branch_id, name: str, exclude_id=None) -> bool:
    qs = Contact.objects.filter(branch_id=branch_id, name=name)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.exists()


def can_delete_contact(contact: Contact) -> tuple[bool, str]:
    if contact.payables.filter(is_deleted=False).exists():
        return False, _("Contact has linked payables and cannot be deleted")
    if contact.receivables.filter(is_deleted=False).exists():
        return False, _("Contact has linked receivables and cannot be deleted")
    return True, ""
