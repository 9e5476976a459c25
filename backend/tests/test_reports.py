# tests/test_reports.py
"""
Tests for the dashboard, exports and smart reports.

Tests cover:
- Query builder: filters, ordering, aggregations, grouping, pagination
- Branch pinning for accountants
- Template management and default handling
- Execution logging and file exports
"""

from decimal import Decimal

import pytest
from django.core.exceptions import PermissionDenied

from accounts.authz import actor_for_user
from accounts.models import User
from reports.commands import create_template, update_template, visible_templates
from reports.exports import sanitize_filename
from reports.models import ReportExecution, ReportFieldMetadata, ReportTemplate
from reports.query_builder import ReportQueryError, build_condition, coerce_value, execute_query
from transactions.commands import create_expense, create_income


def transactions_config(**overrides):
    config = {
        "dataSource": {"type": "transactions"},
        "fields": [
            {"sourceField": "amount", "displayName": "Amount", "order": 1},
            {"sourceField": "type", "displayName": "Type", "order": 2},
            {"sourceField": "branch__name", "displayName": "Branch", "order": 3},
        ],
        "filters": [],
        "orderBy": [{"field": "amount", "direction": "desc"}],
    }
    config.update(overrides)
    return config


@pytest.fixture
def ledger(accountant_actor, admin_actor, other_branch):
    create_income(accountant_actor, amount=Decimal("100"), category="SALES")
    create_income(accountant_actor, amount=Decimal("40"), category="SERVICES")
    create_expense(accountant_actor, amount=Decimal("25"), category="RENT")
    create_income(admin_actor, amount=Decimal("999"), category="SALES", branch_id=other_branch.pk)


# =============================================================================
# Query builder
# =============================================================================

class TestValueCoercion:

    def test_number_string(self):
        assert coerce_value("12.50", "number") == Decimal("12.50")

    def test_enum_is_left_alone(self):
        assert coerce_value("2025-01-01", "enum") == "2025-01-01"

    def test_invalid_number(self):
        with pytest.raises(ReportQueryError):
            coerce_value("abc", "number")

    def test_between_needs_two_values(self):
        with pytest.raises(ReportQueryError):
            build_condition("amount", "between", [1])


@pytest.mark.django_db
class TestExecuteQuery:

    def test_seeded_catalogue(self, report_fields):
        assert ReportFieldMetadata.objects.filter(data_source="transactions", field_name="amount").exists()

    def test_admin_sees_all_branches(self, report_fields, ledger, admin_actor):
        result = execute_query(transactions_config(), admin_actor)

        assert result["totalCount"] == 4
        assert result["data"][0]["amount"] == Decimal("999.00")
        assert set(result["data"][0]) == {"amount", "type", "branch__name", "id"}

    def test_accountant_is_pinned_to_branch(self, report_fields, ledger, accountant_actor):
        result = execute_query(transactions_config(), accountant_actor)

        assert result["totalCount"] == 3
        assert {row["branch__name"] for row in result["data"]} == {"Main Branch"}

    def test_filters(self, report_fields, ledger, accountant_actor):
        config = transactions_config(filters=[
            {"field": "type", "operator": "equals", "value": "INCOME"},
            {"field": "amount", "operator": "greaterThan", "value": "50"},
        ])

        result = execute_query(config, accountant_actor)

        assert result["totalCount"] == 1
        assert result["data"][0]["amount"] == Decimal("100.00")

    def test_unknown_operator_is_skipped(self, report_fields, ledger, accountant_actor):
        config = transactions_config(filters=[{"field": "amount", "operator": "regex", "value": ".*"}])

        assert execute_query(config, accountant_actor)["totalCount"] == 3

    def test_unknown_field_is_refused(self, report_fields, accountant_actor):
        config = transactions_config(fields=[{"sourceField": "created_by__password", "displayName": "x"}])

        with pytest.raises(ReportQueryError):
            execute_query(config, accountant_actor)

    def test_aggregations_cover_all_rows(self, report_fields, ledger, accountant_actor):
        config = transactions_config(
            aggregations=[
                {"field": "amount", "function": "sum", "alias": "total"},
                {"field": "amount", "function": "count", "alias": "rows"},
            ],
            pagination={"enabled": True, "page": 1, "pageSize": 1},
        )

        result = execute_query(config, accountant_actor)

        assert len(result["data"]) == 1
        assert result["aggregations"]["total"] == Decimal("165")
        assert result["aggregations"]["rows"] == 3

    def test_group_by(self, report_fields, ledger, accountant_actor):
        config = transactions_config(
            groupBy=[{"field": "type"}],
            aggregations=[{"field": "amount", "function": "sum", "alias": "total"}],
        )

        result = execute_query(config, accountant_actor)

        groups = {g["groupKey"]["type"]: g for g in result["groupedData"]}
        assert set(groups) == {"INCOME", "EXPENSE"}
        assert len(groups["INCOME"]["rows"]) == 2
        assert groups["INCOME"]["aggregations"]["total"] == Decimal("140")

    def test_unassigned_accountant_is_refused(self, report_fields, unassigned_accountant):
        with pytest.raises(PermissionDenied):
            execute_query(transactions_config(), actor_for_user(unassigned_accountant))


# =============================================================================
# Templates
# =============================================================================

@pytest.mark.django_db
class TestTemplates:

    def test_accountant_cannot_create(self, accountant_actor):
        with pytest.raises(PermissionDenied):
            create_template(accountant_actor, "Mine", "FINANCIAL", transactions_config())

    def test_new_default_clears_previous(self, admin_actor):
        first = create_template(admin_actor, "A", "FINANCIAL", transactions_config(), is_default=True).data
        second = create_template(admin_actor, "B", "FINANCIAL", transactions_config(), is_default=True).data
        other_type = create_template(admin_actor, "C", "DEBTS", transactions_config(), is_default=True).data

        first.refresh_from_db()
        other_type.refresh_from_db()
        assert not first.is_default
        assert second.is_default
        assert other_type.is_default

    def test_update_records_diff(self, admin_actor):
        template = create_template(admin_actor, "A", "FINANCIAL", transactions_config()).data

        result = update_template(admin_actor, template.pk, name="Renamed", is_public=True)

        assert result.success
        assert set(result.event.changes) == {"name", "is_public"}

    def test_private_template_is_visible_only_to_its_owner(self, admin_actor):
        private = create_template(admin_actor, "Mine", "FINANCIAL", transactions_config()).data
        public = create_template(admin_actor, "Shared", "FINANCIAL", transactions_config(), is_public=True).data
        second_admin = User.objects.create_user(username="admin2", password="testpass123", role=User.Role.ADMIN)

        assert set(visible_templates(admin_actor)) == {private, public}
        assert list(visible_templates(actor_for_user(second_admin))) == [public]


# =============================================================================
# API
# =============================================================================

@pytest.mark.django_db
class TestReportAPI:

    def test_dashboard(self, accountant_client, ledger):
        response = accountant_client.get("/api/dashboard/")

        assert response.status_code == 200
        assert response.data["totalRevenue"] == Decimal("140")
        assert response.data["totalExpenses"] == Decimal("25")
        assert response.data["todayTransactions"] == 3
        assert len(response.data["revenueData"]) == 6

    def test_field_list_rejects_unknown_source(self, accountant_client, report_fields):
        assert accountant_client.get("/api/reports/smart/fields/?dataSource=secrets").status_code == 400

        response = accountant_client.get("/api/reports/smart/fields/?dataSource=inventory")
        assert response.status_code == 200
        assert "quantity" in {f["field_name"] for f in response.data}

    def test_execute_logs_execution(self, accountant_client, accountant, report_fields, ledger):
        response = accountant_client.post(
            "/api/reports/smart/execute/",
            {"config": transactions_config()},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["totalCount"] == 3
        execution = ReportExecution.objects.get()
        assert execution.executed_by == accountant
        assert execution.result_count == 3

    def test_execute_unknown_field_is_400(self, accountant_client, report_fields):
        config = transactions_config(fields=[{"sourceField": "nope", "displayName": "Nope"}])

        response = accountant_client.post("/api/reports/smart/execute/", {"config": config}, format="json")

        assert response.status_code == 400
        assert "Unknown field" in response.data["detail"]

    def test_csv_export(self, accountant_client, report_fields, ledger):
        config = transactions_config(exportOptions={"fileName": "june/sales"})

        response = accountant_client.post(
            "/api/reports/smart/export/?format=csv",
            {"config": config},
            format="json",
        )

        assert response.status_code == 200
        assert response["Content-Disposition"] == 'attachment; filename="june_sales.csv"'
        assert "Amount" in response.content.decode("utf-8-sig")
        execution = ReportExecution.objects.get()
        assert execution.export_format == "csv"
        assert execution.file_size == len(response.content)

    def test_pdf_export(self, accountant_client, report_fields, ledger):
        config = transactions_config(exportOptions={"fileName": "june"})

        response = accountant_client.post(
            "/api/reports/smart/export/?format=pdf",
            {"config": config},
            format="json",
        )

        assert response.status_code == 200
        assert response["Content-Type"] == "application/pdf"
        assert response["Content-Disposition"] == 'attachment; filename="june.pdf"'
        assert response.content.startswith(b"%PDF")
        execution = ReportExecution.objects.get()
        assert execution.export_format == "pdf"
        assert execution.file_size == len(response.content)

    def test_unknown_export_format_is_refused(self, accountant_client, report_fields):
        response = accountant_client.post(
            "/api/reports/smart/export/?format=docx",
            {"config": transactions_config()},
            format="json",
        )

        assert response.status_code == 400
        assert ReportExecution.objects.count() == 0

    def test_inventory_export_pdf(self, accountant_client, flour):
        response = accountant_client.get("/api/reports/inventory/export/?format=pdf")

        assert response.status_code == 200
        assert response["Content-Type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")

    def test_transaction_export_xlsx(self, accountant_client, ledger):
        response = accountant_client.get("/api/reports/transactions/export/")

        assert response.status_code == 200
        assert response["Content-Type"].startswith("application/vnd.openxmlformats")

    def test_template_api_is_admin_only_for_writes(self, admin_client, accountant_client):
        payload = {"name": "Daily", "report_type": "FINANCIAL", "config": transactions_config()}

        assert accountant_client.post("/api/reports/smart/templates/", payload, format="json").status_code == 403

        response = admin_client.post("/api/reports/smart/templates/", payload, format="json")
        assert response.status_code == 201
        assert ReportTemplate.objects.filter(name="Daily").exists()

    def test_private_template_is_hidden(self, accountant_client, admin_actor):
        template = create_template(admin_actor, "Private", "FINANCIAL", transactions_config()).data

        response = accountant_client.get(f"/api/reports/smart/templates/{template.pk}/")

        assert response.status_code == 404


class TestSanitizeFilename:

    def test_strips_separators(self):
        assert sanitize_filename("../../etc/passwd", fallback="x") == "____etc_passwd"

    def test_fallback(self):
        assert sanitize_filename("  ", fallback="report") == "report"
