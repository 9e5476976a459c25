# tests/test_contacts.py
"""
Tests for contacts.
"""

from decimal import Decimal

import pytest
from django.core.exceptions import PermissionDenied

from contacts.commands import create_contact, delete_contact, update_contact
from contacts.models import Contact
from debts.commands import create_payable


@pytest.mark.django_db
class TestContactCommands:

    def test_create_in_own_branch(self, accountant_actor, branch):
        result = create_contact(accountant_actor, "Baghdad Bakery", type=Contact.ContactType.CUSTOMER)

        assert result.success
        assert result.data.branch == branch
        assert result.data.created_by == accountant_actor.user

    def test_name_is_unique_per_branch(self, accountant_actor, supplier):
        result = create_contact(accountant_actor, supplier.name)

        assert result.status_code == 409

    def test_same_name_in_another_branch(self, admin_actor, supplier, other_branch):
        assert create_contact(admin_actor, supplier.name, branch_id=other_branch.pk).success

    def test_rename_conflict(self, accountant_actor, supplier, customer):
        result = update_contact(accountant_actor, customer.pk, name=supplier.name)

        assert result.status_code == 409

    def test_other_branch_cannot_update(self, other_accountant_actor, supplier):
        with pytest.raises(PermissionDenied):
            update_contact(other_accountant_actor, supplier.pk, phone="1")

    def test_contact_with_payables_cannot_be_deleted(self, accountant_actor, supplier):
        create_payable(accountant_actor, supplier.pk, Decimal("10"))

        result = delete_contact(accountant_actor, supplier.pk)

        assert not result.success
        assert Contact.objects.filter(pk=supplier.pk).exists()

    def test_delete_is_soft(self, accountant_actor, customer):
        assert delete_contact(accountant_actor, customer.pk).success

        assert not Contact.objects.filter(pk=customer.pk).exists()
        assert Contact.all_objects.get(pk=customer.pk).is_deleted


@pytest.mark.django_db
class TestContactAPI:

    def test_summary_counts_by_type(self, accountant_client, supplier, customer, other_branch_contact):
        response = accountant_client.get("/api/contacts/summary/")

        assert response.status_code == 200
        assert response.data["total"] == 2
        assert response.data["byType"]["suppliers"] == 1
        assert response.data["byType"]["customers"] == 1

    def test_list_is_branch_scoped(self, accountant_client, supplier, other_branch_contact):
        response = accountant_client.get("/api/contacts/")

        assert response.status_code == 200
        assert [c["name"] for c in response.data["data"]] == [supplier.name]

    def test_duplicate_past_the_name_check_is_409(self, accountant_client, supplier, monkeypatch):
        monkeypatch.setattr("contacts.commands.name_taken", lambda *args, **kwargs: False)

        response = accountant_client.post("/api/contacts/", {"name": supplier.name}, format="json")

        assert response.status_code == 409
        assert response.data == {"detail": "Conflicts with an existing record"}
        assert Contact.objects.filter(name=supplier.name).count() == 1


@pytest.mark.django_db
class TestTranslatedErrors:

    def test_duplicate_name_in_arabic(self, accountant_client, supplier):
        response = accountant_client.post(
            "/api/contacts/", {"name": supplier.name}, format="json", HTTP_ACCEPT_LANGUAGE="ar",
        )

        assert response.status_code == 409
        assert response.data["detail"] == "يوجد بالفعل جهة اتصال بنفس الاسم في هذا الفرع"

    def test_missing_contact_in_arabic(self, accountant_client):
        response = accountant_client.get("/api/contacts/999999/", HTTP_ACCEPT_LANGUAGE="ar")

        assert response.status_code == 404
        assert response.data["detail"] == "جهة الاتصال غير موجودة"

    def test_english_without_accept_language(self, accountant_client, supplier):
        response = accountant_client.post("/api/contacts/", {"name": supplier.name}, format="json")

        assert response.data["detail"] == "A contact with this name already exists in the branch"
