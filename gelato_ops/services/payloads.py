"""JSON shaping for API responses (camelCase keys consumed by the front end)."""

from ..utils.timezone_utils import TimezoneUtils

_fmt_dt = TimezoneUtils.format_datetime_for_api
_fmt_date = TimezoneUtils.format_date_for_api


def serialize_category(category):
    if category is None:
        return None
    return {"id": category.id, "name": category.name}


def serialize_item(item):
    if item is None:
        return None
    return {
        "id": item.id,
        "name": item.name,
        "unit": item.unit,
        "targetText": item.target_text,
        "targetNumber": item.target_number,
        "sortOrder": item.sort_order,
        "isActive": item.is_active,
        "category": serialize_category(item.category),
    }


def serialize_packaging_option(option):
    if option is None:
        return None
    return {
        "id": option.id,
        "name": option.name,
        "type": option.type,
        "sizeValue": option.size_value,
        "sizeUnit": option.size_unit,
        "variableWeight": bool(option.variable_weight),
        "allowStores": bool(option.allow_stores),
        "allowCustomers": bool(option.allow_customers),
        "sortOrder": option.sort_order,
    }


def serialize_customer(customer):
    if customer is None:
        return None
    return {
        "id": customer.id,
        "name": customer.name,
        "type": customer.type,
        "email": customer.email,
        "phone": customer.phone,
        "isActive": customer.is_active,
    }


def serialize_store(store):
    if store is None:
        return None
    return {"id": store.id, "name": store.name, "slug": store.slug}


def serialize_delivery_item(line):
    return {
        "id": line.id,
        "planId": line.plan_id,
        "itemId": line.item_id,
        "quantity": line.quantity,
        "note": line.note,
        "weightKg": line.weight_kg,
        "packagingOptionId": line.packaging_option_id,
        "packagingOption": serialize_packaging_option(line.packaging_option),
        "item": serialize_item(line.item),
    }


def serialize_delivery_plan(plan):
    return {
        "id": plan.id,
        "date": _fmt_date(plan.date),
        "status": plan.status,
        "notes": plan.notes,
        "storeId": plan.store_id,
        "store": serialize_store(plan.store),
        "customers": [
            {
                "id": link.customer.id,
                "name": link.customer.name,
                "type": link.customer.type,
                "priority": link.priority,
                "notes": link.notes,
            }
            for link in plan.customer_links
            if link.customer is not None
        ],
        "items": [serialize_delivery_item(line) for line in plan.items],
        "createdAt": _fmt_dt(plan.created_at),
        "updatedAt": _fmt_dt(plan.updated_at),
    }


def serialize_production_task(task):
    return {
        "id": task.id,
        "date": _fmt_date(task.date),
        "itemId": task.item_id,
        "item": serialize_item(task.item),
        "quantity": task.quantity,
        "unit": task.unit,
        "outputKind": task.output_kind,
        "status": task.status,
        "notes": task.notes,
        "totalWeightKg": task.total_weight_kg,
        "packagingOptionId": task.packaging_option_id,
        "packagingOption": serialize_packaging_option(task.packaging_option),
        "createdByUserId": task.created_by_user_id,
        "assignedToUserId": task.assigned_to_user_id,
        "startedAt": _fmt_dt(task.started_at),
        "completedAt": _fmt_dt(task.completed_at),
        "createdAt": _fmt_dt(task.created_at),
        "updatedAt": _fmt_dt(task.updated_at),
    }


def serialize_stocktake(stocktake):
    return {
        "id": stocktake.id,
        "storeId": stocktake.store_id,
        "store": serialize_store(stocktake.store),
        "date": _fmt_date(stocktake.date),
        "submittedAt": _fmt_dt(stocktake.submitted_at),
        "isMaster": bool(stocktake.is_master),
        "notes": stocktake.notes,
        "items": [
            {
                "id": row.id,
                "itemId": row.item_id,
                "itemName": row.item.name if row.item else None,
                "quantity": row.quantity,
                "note": row.note,
            }
            for row in stocktake.items
        ],
    }


def serialize_store_inventory(row):
    return {
        "id": row.id,
        "storeId": row.store_id,
        "itemId": row.item_id,
        "item": serialize_item(row.item),
        "targetQuantity": row.target_quantity,
        "targetText": row.target_text,
        "unit": row.unit,
        "isActive": bool(row.is_active),
    }
