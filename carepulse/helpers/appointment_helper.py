# carepulse/helpers/appointment_helper.py

import re
from typing import Any, Dict, List, Optional

from carepulse.utils.date_utils import format_date_time

PAYMENT_DETAILS = {
    "cash": {"icon": "💵", "label": "Cash Payment"},
    "easypaisa": {"icon": "📱", "label": "EasyPaisa"},
    "jazzcash": {"icon": "📱", "label": "JazzCash"},
    "bank": {"icon": "🏦", "label": "Bank Transfer"},
}
UNKNOWN_PAYMENT = {"icon": "💳", "label": "Unknown"}
DOCTOR_PREFIX = re.compile(r"^dr\.?\s", re.IGNORECASE)

STATUS_ICONS = {
    "scheduled": "/assets/icons/check.svg",
    "pending": "/assets/icons/pending.svg",
    "cancelled": "/assets/icons/cancelled.svg",
}


def payment_details(method: Optional[str]) -> Dict[str, str]:
    return dict(PAYMENT_DETAILS.get(method or "", UNKNOWN_PAYMENT))


def status_badge(status: str) -> Dict[str, str]:
    return {"status": status, "icon": STATUS_ICONS.get(status, STATUS_ICONS["pending"])}


def doctor_label(name: str) -> str:
    return name if DOCTOR_PREFIX.match(name) else f"Dr. {name}"


def row_actions(appointment: Dict[str, Any], patient: Optional[Dict[str, Any]]) -> List[str]:
    # Rows without a resolvable patient get no actions, like the admin table
    if not patient:
        return []
    actions = ["schedule", "cancel"]
    if appointment.get("payment_method"):
        actions.append("view_payment")
    return actions


def build_appointment_row(
        appointment: Dict[str, Any],
        patient: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Derive the display fields of one dashboard row from a serialized appointment.

    Args:
        appointment: serialized appointment record
        patient: serialized patient record, if one could be found

    Returns:
        Dictionary with the row's display values
    """
    method = appointment.get("payment_method")
    payment = payment_details(method)
    payment.update({
        "method": method or "N/A",
        "amount": appointment.get("payment_amount"),
        # Transaction IDs only matter for wallet and bank transfers
        "transaction_id": appointment.get("transaction_id") if method and method != "cash" else None,
        "needs_verification": bool(method and method != "cash"),
    })

    return {
        "id": appointment["id"],
        "patient_name": (patient or {}).get("name") or "N/A",
        "patient_phone": (patient or {}).get("phone") or "N/A",
        "status": status_badge(appointment["status"]),
        "schedule": format_date_time(appointment["schedule"]),
        "time_slot": appointment.get("time_slot"),
        "doctor": doctor_label(appointment["primary_physician"]),
        "payment": payment,
        "cancellation_reason": appointment.get("cancellation_reason"),
        "actions": row_actions(appointment, patient),
    }
