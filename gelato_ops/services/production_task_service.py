"""Production task scheduling and execution.

Synopsis:
Create and list factory production tasks and apply start/complete/cancel
transitions requested by factory staff.

Glossary:
- Tray task: A task whose output kind is TRAY; completing it requires the
  total produced weight.
- Status override: A literal status supplied by the caller; it replaces the
  computed state and skips the transition guards.
"""

import logging
import math

from ..extensions import db
from ..models import Item, PackagingOption, ProductionTask, User
from ..utils.timezone_utils import TimezoneUtils
from .errors import NotFoundError, ValidationError
from .repositories import ProductionTaskStore, SqlAlchemyProductionTaskStore

logger = logging.getLogger(__name__)

TRAY_WEIGHT_REQUIRED = "Total weight (kg) is required to complete tray tasks"


def _positive_number(raw, field_name):
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValidationError(f"{field_name} must be a positive number")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a positive number")
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{field_name} must be a positive number")
    return value


def _optional_fk(model, raw, field_name):
    if raw in (None, "", 0):
        return None
    try:
        obj = db.session.get(model, int(raw))
    except (TypeError, ValueError):
        obj = None
    if obj is None:
        raise ValidationError(f"Unknown {field_name}")
    return obj.id


def list_tasks(start=None, end=None):
    query = ProductionTask.query
    if start is not None:
        query = query.filter(ProductionTask.date >= start)
    if end is not None:
        query = query.filter(ProductionTask.date <= end)
    return query.order_by(
        ProductionTask.date.asc(),
        ProductionTask.status.asc(),
        ProductionTask.created_at.desc(),
    ).all()


def create_task(payload: dict, actor=None) -> ProductionTask:
    task_date = TimezoneUtils.parse_api_date(payload.get("date"))
    item_id = payload.get("itemId")
    quantity = payload.get("quantity")
    if task_date is None or item_id in (None, "") or quantity in (None, ""):
        raise ValidationError("date, itemId, and quantity are required")

    quantity = _positive_number(quantity, "quantity")
    item_pk = _optional_fk(Item, item_id, "item")
    if item_pk is None:
        raise ValidationError("Unknown item")
    unit = (payload.get("unit") or "units").strip() or "units"

    output_kind = payload.get("outputKind")
    if output_kind is None:
        output_kind = ProductionTask.infer_output_kind(unit)
    elif output_kind not in ProductionTask.OUTPUT_KINDS:
        raise ValidationError("outputKind must be UNITS or TRAY")

    task = ProductionTask(
        date=task_date,
        item_id=item_pk,
        quantity=quantity,
        unit=unit,
        output_kind=output_kind,
        notes=payload.get("notes") if isinstance(payload.get("notes"), str) else None,
        assigned_to_user_id=_optional_fk(User, payload.get("assignedToUserId"), "user"),
        packaging_option_id=_optional_fk(PackagingOption, payload.get("packagingOptionId"), "packaging option"),
        created_by_user_id=getattr(actor, "id", None),
        status=ProductionTask.STATUS_SCHEDULED,
    )
    db.session.add(task)
    db.session.commit()
    logger.info("Scheduled production task %s (%s %s of item %s)", task.id, quantity, unit, item_pk)
    return task


def apply_update(task_id, changes: dict, actor, *, store: ProductionTaskStore = None) -> ProductionTask:
    """Apply field edits and one of start/complete/cancel to a task.

    A literal `status` in `changes` is an administrative override: it is
    applied last and bypasses the transition guards.
    """
    store = store or SqlAlchemyProductionTaskStore()
    task = store.get_task(task_id)
    if task is None:
        raise NotFoundError("Production task not found")

    status_override = changes.get("status")
    if status_override is not None and status_override not in ProductionTask.STATUSES:
        raise ValidationError("Invalid status. Must be SCHEDULED, IN_PROGRESS, DONE, or CANCELLED")
    enforce_guards = status_override is None

    if isinstance(changes.get("notes"), str):
        task.notes = changes["notes"]
    if "assignedToUserId" in changes:
        task.assigned_to_user_id = _optional_fk(User, changes["assignedToUserId"], "user")
    if "packagingOptionId" in changes:
        task.packaging_option_id = _optional_fk(PackagingOption, changes["packagingOptionId"], "packaging option")

    weight = _positive_number(changes.get("totalWeightKg"), "totalWeightKg")
    actor_id = getattr(actor, "id", None)
    now = TimezoneUtils.utc_now()
    previous = task.status

    if changes.get("start"):
        if enforce_guards and task.status in ProductionTask.TERMINAL_STATUSES:
            raise ValidationError(f"Cannot start a task that is {task.status}")
        task.status = ProductionTask.STATUS_IN_PROGRESS
        task.started_at = now
        if task.assigned_to_user_id is None:
            task.assigned_to_user_id = actor_id

    if changes.get("complete"):
        if enforce_guards and task.is_tray_task and weight is None:
            raise ValidationError(TRAY_WEIGHT_REQUIRED)
        task.status = ProductionTask.STATUS_DONE
        task.completed_at = now
        if task.assigned_to_user_id is None:
            task.assigned_to_user_id = actor_id

    if weight is not None and task.is_tray_task:
        task.total_weight_kg = weight

    if changes.get("cancel"):
        task.status = ProductionTask.STATUS_CANCELLED

    if status_override is not None:
        logger.warning("Production task %s status overridden to %s by user %s", task_id, status_override, actor_id)
        task.status = status_override

    task = store.save_task(task)
    if task.status != previous:
        logger.info("Production task %s: %s -> %s", task_id, previous, task.status)
    return task
