# reports/query_builder.py
"""
Smart report query builder.

Turns a report configuration (data source, visible fields, filters,
ordering, aggregations, grouping, pagination) into a Django query and
returns:

    {
        "data": [...],            # one dict per row, visible fields + id
        "totalCount": int,        # rows matching the filters
        "aggregations": {...},    # over the full filtered set, or None
        "groupedData": [...],     # groups of the returned rows, or None
        "executionTime": int,     # ms
    }

Only fields known to ReportFieldMetadata for the data source can be
selected, filtered, sorted, aggregated or grouped. Accountants are pinned
to their branch on every branch-bearing source.
"""
import logging
import re
import time
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from django.core.exceptions import FieldDoesNotExist
from django.db import models
from django.db.models import Avg, Count, Max, Min, Q, Sum
from django.utils.translation import gettext as _

from accounts.authz import ActorContext, effective_branch_filter

from .catalog import DATA_SOURCES
from .models import ReportFieldMetadata

logger = logging.getLogger(__name__)

FILTER_OPERATORS = (
    "equals",
    "notEquals",
    "greaterThan",
    "greaterThanOrEqual",
    "lessThan",
    "lessThanOrEqual",
    "contains",
    "startsWith",
    "endsWith",
    "in",
    "notIn",
    "between",
    "isNull",
    "isNotNull",
)

_COMPARISON_LOOKUPS = {
    "equals": "exact",
    "greaterThan": "gt",
    "greaterThanOrEqual": "gte",
    "lessThan": "lt",
    "lessThanOrEqual": "lte",
}

_TEXT_LOOKUPS = {
    "contains": "icontains",
    "startsWith": "istartswith",
    "endsWith": "iendswith",
}

AGGREGATIONS = {
    "sum": Sum,
    "avg": Avg,
    "count": Count,
    "min": Min,
    "max": Max,
}

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}")


class ReportQueryError(Exception):
    """The configuration cannot be turned into a query."""


# =============================================================================
# Values and conditions
# =============================================================================

def coerce_value(value, data_type=None):
    """
    Convert a filter value coming from JSON.

    Strings become dates (ISO), numbers or booleans. When the field's data
    type is known only that conversion is attempted.
    """
    if not isinstance(value, str):
        return value
    if data_type in ("string", "enum"):
        return value

    text = value.strip()

    if data_type in (None, "date") and _ISO_DATE.match(text):
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            if data_type == "date":
                raise ReportQueryError(_("Invalid date: %(value)s") % {"value": value})

    if data_type in (None, "number") and text:
        try:
            return Decimal(text)
        except InvalidOperation:
            if data_type == "number":
                raise ReportQueryError(_("Invalid number: %(value)s") % {"value": value})

    if data_type in (None, "boolean"):
        if text.lower() == "true":
            return True
        if text.lower() == "false":
            return False
        if data_type == "boolean":
            raise ReportQueryError(_("Invalid boolean: %(value)s") % {"value": value})

    return value


def build_condition(path: str, operator: str, value=None, data_type=None) -> Q:
    """Q object for one filter on a lookup path."""
    if operator == "isNull":
        return Q(**{f"{path}__isnull": True})
    if operator == "isNotNull":
        return Q(**{f"{path}__isnull": False})

    if operator == "between":
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise ReportQueryError(_("between requires a [min, max] value"))
        low, high = (coerce_value(v, data_type) for v in value)
        return Q(**{f"{path}__gte": low, f"{path}__lte": high})

    if operator in ("in", "notIn"):
        if not isinstance(value, (list, tuple)):
            raise ReportQueryError(_("%(operator)s requires a list value") % {"operator": operator})
        condition = Q(**{f"{path}__in": [coerce_value(v, data_type) for v in value]})
        return condition if operator == "in" else ~condition

    if operator in _TEXT_LOOKUPS:
        return Q(**{f"{path}__{_TEXT_LOOKUPS[operator]}": str(value)})

    converted = coerce_value(value, data_type)
    if operator == "notEquals":
        return ~Q(**{path: converted})
    return Q(**{f"{path}__{_COMPARISON_LOOKUPS[operator]}": converted})


def _filter_path(model, field_name: str, data_type) -> str:
    # date filters on datetime columns compare the calendar day
    if data_type != "date" or "__" in field_name:
        return field_name
    try:
        field = model._meta.get_field(field_name)
    except FieldDoesNotExist:
        return field_name
    if isinstance(field, models.DateTimeField):
        return f"{field_name}__date"
    return field_name


# =============================================================================
# Catalogue checks
# =============================================================================

def field_catalogue(data_source: str) -> dict:
    return {
        meta.field_name: meta
        for meta in ReportFieldMetadata.objects.filter(data_source=data_source)
    }


def _known(catalogue, data_source, name, capability=None):
    meta = catalogue.get(name)
    if meta is None:
        raise ReportQueryError(
            _("Unknown field '%(field)s' for data source '%(source)s'") % {"field": name, "source": data_source}
        )
    if capability and not getattr(meta, capability):
        raise ReportQueryError(
            _("Field '%(field)s' is not %(capability)s") % {"field": name, "capability": _(capability)}
        )
    return meta


# =============================================================================
# Execution
# =============================================================================

def _is_number(value) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def local_aggregate(rows, field: str, function: str):
    values = [row.get(field) for row in rows]
    values = [v for v in values if _is_number(v)]
    if not values:
        return None
    if function == "sum":
        return sum(values)
    if function == "avg":
        return sum(values) / len(values)
    if function == "count":
        return len(values)
    if function == "min":
        return min(values)
    if function == "max":
        return max(values)
    return None


def _group_key_value(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def _group(raw_rows, rows, group_by, aggregations):
    groups = {}
    for raw, row in zip(raw_rows, rows):
        key = tuple(_group_key_value(raw.get(g["field"])) for g in group_by)
        groups.setdefault(key, ([], []))
        groups[key][0].append(raw)
        groups[key][1].append(row)

    result = []
    for key, (raw_members, members) in groups.items():
        result.append({
            "groupKey": {g["field"]: value for g, value in zip(group_by, key)},
            "rows": members,
            "aggregations": {
                agg["alias"]: local_aggregate(raw_members, agg["field"], agg["function"])
                for agg in aggregations
            },
        })
    return result


def visible_fields(fields):
    return sorted(
        (f for f in fields if f.get("visible", True)),
        key=lambda f: f.get("order", 0),
    )


def execute_query(config: dict, actor: ActorContext) -> dict:
    """
    Run a report configuration for an actor.

    Raises:
        ReportQueryError: invalid data source or field usage
        PermissionDenied: accountant without a branch
    """
    started = time.monotonic()

    data_source = (config.get("dataSource") or {}).get("type")
    source = DATA_SOURCES.get(data_source)
    if source is None:
        raise ReportQueryError(_("Invalid data source: %(source)s") % {"source": data_source})

    catalogue = field_catalogue(data_source)
    model = source.model
    queryset = model.objects.all()

    if source.branch_field:
        branch_id = effective_branch_filter(actor)
        if branch_id is not None:
            queryset = queryset.filter(**{f"{source.branch_field}_id": branch_id})

    where = Q()
    for flt in config.get("filters") or []:
        operator = flt.get("operator")
        if operator not in FILTER_OPERATORS:
            logger.warning("Ignoring report filter with unknown operator", extra={"operator": operator})
            continue
        meta = _known(catalogue, data_source, flt.get("field"), "filterable")
        path = _filter_path(model, meta.field_name, meta.data_type)
        where &= build_condition(path, operator, flt.get("value"), meta.data_type)
    queryset = queryset.filter(where)

    total_count = queryset.count()

    columns = visible_fields(config.get("fields") or [])
    for column in columns:
        _known(catalogue, data_source, column["sourceField"])
    group_by = config.get("groupBy") or []
    for group in group_by:
        _known(catalogue, data_source, group["field"], "groupable")
    aggregations = config.get("aggregations") or []
    for agg in aggregations:
        if agg["function"] not in AGGREGATIONS:
            raise ReportQueryError(_("Invalid aggregation function: %(function)s") % {"function": agg["function"]})
        _known(catalogue, data_source, agg["field"], None if agg["function"] == "count" else "aggregatable")

    ordering = []
    for order in config.get("orderBy") or []:
        meta = _known(catalogue, data_source, order["field"], "sortable")
        prefix = "-" if order.get("direction") == "desc" else ""
        ordering.append(f"{prefix}{meta.field_name}")
    ordering.append("-pk")

    selected = list(dict.fromkeys(
        ["id"]
        + [c["sourceField"] for c in columns]
        + [g["field"] for g in group_by]
        + [a["field"] for a in aggregations]
    ))
    rows_qs = queryset.order_by(*ordering).values(*selected)

    pagination = config.get("pagination") or {}
    if pagination.get("enabled"):
        page = max(int(pagination.get("page") or 1), 1)
        page_size = max(int(pagination.get("pageSize") or 50), 1)
        offset = (page - 1) * page_size
        rows_qs = rows_qs[offset:offset + page_size]

    raw_rows = list(rows_qs)
    data = [
        {**{c["sourceField"]: raw.get(c["sourceField"]) for c in columns}, "id": raw["id"]}
        for raw in raw_rows
    ]

    aggregation_result = None
    if aggregations:
        aggregation_result = queryset.aggregate(**{
            agg["alias"]: AGGREGATIONS[agg["function"]](agg["field"])
            for agg in aggregations
        })

    grouped = _group(raw_rows, data, group_by, aggregations) if group_by else None

    execution_time = int((time.monotonic() - started) * 1000)
    logger.info(
        "Report executed",
        extra={"data_source": data_source, "rows": len(data), "total": total_count, "ms": execution_time},
    )
    return {
        "data": data,
        "totalCount": total_count,
        "aggregations": aggregation_result,
        "groupedData": grouped,
        "executionTime": execution_time,
    }
