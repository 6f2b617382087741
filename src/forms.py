"""Turn pydantic validation errors into per-field form messages."""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import ValidationError

CONTACT_LABELS = {
    "full_name": "Full name",
    "email": "Email",
    "mobile": "Mobile number",
    "city": "City",
}

NEWSLETTER_LABELS = {"email": "Email"}

PROJECT_LABELS = {
    "name": "Project name",
    "description": "Description",
}

CLIENT_LABELS = {
    "name": "Client name",
    "designation": "Designation",
    "description": "Description",
}


def field_errors(
    exc: ValidationError,
    labels: Dict[str, str],
    invalid_messages: Optional[Dict[str, str]] = None,
) -> Dict[str, str]:
    """Map a ValidationError to ``{field: message}``.

    Only the first error of each field is kept.

    Args:
        exc: Error raised by a schema's ``model_validate``
        labels: Human readable field names
        invalid_messages: Messages for format errors (e.g. a bad email)

    Returns:
        Dict of field name -> message
    """
    invalid_messages = invalid_messages or {}
    errors: Dict[str, str] = {}

    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "__root__"
        if field in errors:
            continue

        label = labels.get(field, field.replace("_", " ").capitalize())
        err_type = err["type"]
        ctx = err.get("ctx") or {}

        if err_type in ("missing", "string_too_short"):
            message = f"{label} is required"
        elif err_type == "string_too_long":
            message = f"{label} must be at most {ctx.get('max_length')} characters"
        else:
            message = invalid_messages.get(field, f"{label} is invalid")

        errors[field] = message

    return errors


def has_missing_fields(exc: ValidationError) -> bool:
    """True if any required field was absent or blank."""
    return any(
        err["type"] in ("missing", "string_too_short") for err in exc.errors()
    )
