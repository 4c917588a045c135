"""Backfill of persisted order records written by older versions of the app.

The upgrade is one-way and idempotent: a record that already has the current
shape comes out unchanged, so it is safe to apply on every load.
"""
import uuid
from typing import Any, Dict

from foodcart.enums.delivery_status import DeliveryStatus
from foodcart.models.order.delivery_partner import NOT_ASSIGNED_CONTACT, NOT_ASSIGNED_NAME

# Legacy order keys -> current keys
LEGACY_ORDER_KEYS = {
    "order": "lineItems",
    "timestamp": "createdAt",
}

# Legacy line keys -> current keys
LEGACY_LINE_KEYS = {
    "id": "productId",
    "price": "unitPrice",
    "qty": "quantity",
}


def _rename_keys(record: Dict[str, Any], mapping: Dict[str, str]) -> Dict[str, Any]:
    renamed = dict(record)
    for old, new in mapping.items():
        if old in renamed and new not in renamed:
            renamed[new] = renamed.pop(old)
    return renamed


def migrate_line_item(raw: Dict[str, Any]) -> Dict[str, Any]:
    line = _rename_keys(raw, LEGACY_LINE_KEYS)
    # The old menu payload carried display-only fields along with the line
    return {key: line[key] for key in ("productId", "name", "unitPrice", "quantity") if key in line}


def migrate_order_record(raw: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise TypeError(f"Order record must be an object, got {type(raw).__name__}")

    record = _rename_keys(raw, LEGACY_ORDER_KEYS)

    order_id = record.get("orderId")
    if not (isinstance(order_id, str) and order_id):
        record["orderId"] = str(order_id) if order_id else str(uuid.uuid4())

    if not record.get("deliveryStatus"):
        record["deliveryStatus"] = DeliveryStatus.PENDING.value

    if not record.get("deliveryPartner"):
        record["deliveryPartner"] = {"name": NOT_ASSIGNED_NAME, "contact": NOT_ASSIGNED_CONTACT}

    if not record.get("notes"):
        record["notes"] = ""

    lines = record.get("lineItems")
    if isinstance(lines, list):
        record["lineItems"] = [migrate_line_item(line) if isinstance(line, dict) else line for line in lines]
        if record.get("total") is None:
            record["total"] = sum(
                line.get("unitPrice", 0) * line.get("quantity", 0)
                for line in record["lineItems"]
                if isinstance(line, dict)
            )

    return record
