# tests/test_ops.py
"""
Tests for health checks, metrics and logging configuration.
"""

import json
import logging
from decimal import Decimal

import pytest
from django.core.exceptions import ObjectDoesNotExist
from django.db import IntegrityError

from core.exceptions import PolicyViolation, api_exception_handler
from ops.logging_config import APP_LOGGERS, JsonFormatter, get_logging_config
from ops.metrics import _endpoint_label
from transactions.commands import create_income


@pytest.mark.django_db
class TestHealthEndpoints:

    def test_liveness(self, client):
        response = client.get("/_health/live")

        assert response.status_code == 200
        assert response.json() == {"status": "alive"}

    def test_readiness(self, client):
        response = client.get("/_health/ready")

        assert response.status_code == 200
        assert response.json()["database"]["status"] == "healthy"


@pytest.mark.django_db
class TestMetrics:

    def test_transaction_counter_is_exposed(self, client, accountant_actor):
        create_income(accountant_actor, amount=Decimal("10"))

        response = client.get("/_metrics/")

        assert response.status_code == 200
        body = response.content.decode()
        assert 'ledger_transactions_created_total{type="INCOME"}' in body
        assert "ledger_open_debts" in body

    def test_endpoint_label_hides_ids(self):
        assert _endpoint_label("/api/payables/42/pay/") == "/api/payables/{id}/pay/"

    def test_endpoint_label_hides_consecutive_ids(self):
        assert _endpoint_label("/api/x/1/2/") == "/api/x/{id}/{id}/"
        assert _endpoint_label("/api/x/7") == "/api/x/{id}"


class TestLogging:

    def test_json_formatter_includes_extras(self):
        record = logging.LogRecord("transactions", logging.INFO, __file__, 10, "Transaction created", None, None)
        record.transaction_id = 7

        entry = json.loads(JsonFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "transactions"
        assert entry["message"] == "Transaction created"
        assert entry["extra"] == {"transaction_id": 7}

    def test_every_app_gets_a_logger(self, monkeypatch):
        monkeypatch.delenv("LOG_FORMAT", raising=False)

        config = get_logging_config(debug=False)

        assert config["handlers"]["console"]["formatter"] == "json"
        for app in APP_LOGGERS:
            assert app in config["loggers"]

    def test_console_format_in_debug(self, monkeypatch):
        monkeypatch.delenv("LOG_FORMAT", raising=False)

        config = get_logging_config(debug=True)

        assert config["handlers"]["console"]["formatter"] == "verbose"


class TestExceptionHandler:

    def test_integrity_error_is_409(self):
        response = api_exception_handler(IntegrityError("UNIQUE constraint failed"), {})

        assert response.status_code == 409
        assert response.data == {"detail": "Conflicts with an existing record"}

    def test_missing_row_is_404(self):
        response = api_exception_handler(ObjectDoesNotExist(), {})

        assert response.status_code == 404

    def test_policy_violation_is_400(self):
        response = api_exception_handler(PolicyViolation("Branch is closed"), {})

        assert response.status_code == 400
        assert response.data == {"detail": "Branch is closed"}
