# reports/commands.py
"""
Commands for smart report templates and executions.

Templates are managed by admins only. Anyone with reports.view sees
public templates and their own. Every execute and export writes a
ReportExecution row.
"""
import logging

from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext as _

from accounts.authz import ActorContext, require
from core.audit import EntityType, log_create, log_delete, log_update, snapshot
from core.commands import CommandResult
from core.exports import ExportFormat, create_export_response

from .exports import report_columns, sanitize_filename
from .models import ReportExecution, ReportTemplate
from .query_builder import ReportQueryError, execute_query

logger = logging.getLogger(__name__)


def visible_templates(actor: ActorContext):
    require(actor, "reports.view")
    return ReportTemplate.objects.filter(
        Q(is_public=True) | Q(created_by=actor.user)
    ).select_related("created_by")


def _clear_other_defaults(template: ReportTemplate):
    ReportTemplate.objects.filter(
        report_type=template.report_type,
        is_default=True,
    ).exclude(pk=template.pk).update(is_default=False)


def _editable_template(actor: ActorContext, template_id: int):
    """(template, None) or (None, failure)."""
    template = ReportTemplate.objects.filter(pk=template_id).first()
    if template is None:
        return None, CommandResult.not_found(_("Template not found"))
    if template.created_by_id != actor.user.pk and not actor.is_admin:
        return None, CommandResult.fail(_("You can only change your own templates"), status_code=403)
    return template, None


@transaction.atomic
def create_template(actor: ActorContext, name: str, report_type: str, config: dict, **fields) -> CommandResult:
    require(actor, "reports.manage_templates")

    template = ReportTemplate.objects.create(
        name=name,
        report_type=report_type,
        config=config,
        description=fields.get("description", ""),
        is_public=fields.get("is_public", False),
        is_default=fields.get("is_default", False),
        created_by=actor.user,
    )
    if template.is_default:
        _clear_other_defaults(template)

    entry = log_create(actor, EntityType.REPORT_TEMPLATE, template)
    logger.info("Report template created", extra={"template_id": template.pk, "report_type": report_type})
    return CommandResult.ok(template, event=entry)


@transaction.atomic
def update_template(actor: ActorContext, template_id: int, **updates) -> CommandResult:
    require(actor, "reports.manage_templates")

    template, failure = _editable_template(actor, template_id)
    if failure:
        return failure

    before = snapshot(template)
    for field in ("name", "description", "config", "is_public", "is_default"):
        if field in updates:
            setattr(template, field, updates[field])
    template.save()
    if template.is_default:
        _clear_other_defaults(template)

    entry = log_update(actor, EntityType.REPORT_TEMPLATE, template, before)
    return CommandResult.ok(template, event=entry)


@transaction.atomic
def delete_template(actor: ActorContext, template_id: int) -> CommandResult:
    require(actor, "reports.manage_templates")

    template, failure = _editable_template(actor, template_id)
    if failure:
        return failure

    template.soft_delete(actor.user)
    entry = log_delete(actor, EntityType.REPORT_TEMPLATE, template)
    return CommandResult.ok({"success": True, "id": template.pk}, event=entry)


# =============================================================================
# Execution
# =============================================================================

def _template_or_none(actor, template_id):
    if template_id is None:
        return None
    return visible_templates(actor).filter(pk=template_id).first()


def _log_execution(actor, config, result, template=None, export_format="", file_size=None):
    return ReportExecution.objects.create(
        template=template,
        config=config,
        applied_filters=config.get("filters") or [],
        result_count=result["totalCount"],
        execution_time=result["executionTime"],
        export_format=export_format,
        file_size=file_size,
        executed_by=actor.user,
    )


def execute_report(actor: ActorContext, config: dict, template_id=None) -> CommandResult:
    require(actor, "reports.execute")

    try:
        result = execute_query(config, actor)
    except ReportQueryError as exc:
        return CommandResult.fail(str(exc))

    _log_execution(actor, config, result, template=_template_or_none(actor, template_id))
    return CommandResult.ok(result)


def export_report(actor: ActorContext, config: dict, export_format: str, template_id=None) -> CommandResult:
    """Run the report and render it; data is the HttpResponse attachment."""
    require(actor, "reports.export")

    if export_format not in ExportFormat.CHOICES:
        return CommandResult.fail(_("Invalid format. Must be one of: %(formats)s") % {"formats": ", ".join(ExportFormat.CHOICES)})

    try:
        result = execute_query(config, actor)
    except ReportQueryError as exc:
        return CommandResult.fail(str(exc))

    options = config.get("exportOptions") or {}
    filename = sanitize_filename(
        options.get("fileName"),
        fallback=f"report-{timezone.localdate().isoformat()}",
    )
    response = create_export_response(
        data=result["data"],
        columns=report_columns(config["fields"]),
        format=export_format,
        filename=filename,
        title=filename,
    )

    _log_execution(
        actor,
        config,
        result,
        template=_template_or_none(actor, template_id),
        export_format=export_format,
        file_size=int(response["Content-Length"]),
    )
    logger.info(
        "Report exported",
        extra={"format": export_format, "rows": result["totalCount"], "bytes": response["Content-Length"]},
    )
    return CommandResult.ok(response)
