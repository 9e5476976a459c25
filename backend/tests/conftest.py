# tests/conftest.py
"""
Pytest fixtures for the ledger backend.

Two branches, one admin (no branch) and one accountant per branch. Actor
fixtures mirror what resolve_actor builds for a request.
"""

from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.core.management import call_command

from accounts.authz import actor_for_user
from accounts.models import Branch
from contacts.models import Contact
from employees.models import Employee
from inventory.models import InventoryItem


User = get_user_model()


@pytest.fixture(autouse=True)
def _clear_cache():
    """Login lockout and throttles live in the cache."""
    cache.clear()
    yield
    cache.clear()


# =============================================================================
# Branch & User Fixtures
# =============================================================================

@pytest.fixture
def branch(db):
    return Branch.objects.create(name="Main Branch", location="Baghdad", manager_name="Ali")


@pytest.fixture
def other_branch(db):
    return Branch.objects.create(name="Second Branch", location="Basra")


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        username="admin",
        password="testpass123",
        role=User.Role.ADMIN,
    )


@pytest.fixture
def accountant(db, branch):
    return User.objects.create_user(
        username="accountant",
        password="testpass123",
        role=User.Role.ACCOUNTANT,
        branch=branch,
    )


@pytest.fixture
def other_accountant(db, other_branch):
    return User.objects.create_user(
        username="accountant2",
        password="testpass123",
        role=User.Role.ACCOUNTANT,
        branch=other_branch,
    )


@pytest.fixture
def unassigned_accountant(db):
    return User.objects.create_user(
        username="floating",
        password="testpass123",
        role=User.Role.ACCOUNTANT,
    )


# =============================================================================
# Actor Context Fixtures
# =============================================================================

@pytest.fixture
def admin_actor(admin_user):
    return actor_for_user(admin_user)


@pytest.fixture
def accountant_actor(accountant):
    return actor_for_user(accountant)


@pytest.fixture
def other_accountant_actor(other_accountant):
    return actor_for_user(other_accountant)


# =============================================================================
# Domain Fixtures
# =============================================================================

@pytest.fixture
def supplier(db, branch, admin_user):
    return Contact.objects.create(
        name="Al-Noor Supplies",
        type=Contact.ContactType.SUPPLIER,
        phone="0770000000",
        branch=branch,
        created_by=admin_user,
    )


@pytest.fixture
def customer(db, branch, admin_user):
    return Contact.objects.create(
        name="Hassan Market",
        type=Contact.ContactType.CUSTOMER,
        branch=branch,
        created_by=admin_user,
    )


@pytest.fixture
def other_branch_contact(db, other_branch, admin_user):
    return Contact.objects.create(
        name="Basra Traders",
        branch=other_branch,
        created_by=admin_user,
    )


@pytest.fixture
def flour(db, branch):
    return InventoryItem.objects.create(
        branch=branch,
        name="Flour",
        unit="KG",
        quantity=Decimal("100.000"),
        cost_per_unit=Decimal("2.00"),
        selling_price=Decimal("3.00"),
    )


@pytest.fixture
def employee(db, branch, admin_user):
    return Employee.objects.create(
        branch=branch,
        name="Karim",
        position="Cashier",
        base_salary=Decimal("500.00"),
        allowance=Decimal("50.00"),
        hire_date=date(2024, 1, 1),
        created_by=admin_user,
    )


@pytest.fixture
def report_fields(db):
    """Field catalogue of the smart report builder."""
    call_command("seed_report_fields", verbosity=0)


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def api_client():
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def admin_client(admin_user):
    from rest_framework.test import APIClient
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def accountant_client(accountant):
    from rest_framework.test import APIClient
    client = APIClient()
    client.force_authenticate(user=accountant)
    return client
