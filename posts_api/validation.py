"""
Posts API: Post Payload Validation
==================================

What:  Explicit per-field rule table for post create/update bodies, plus the
       function that evaluates it.
Why:   Clients expect a 400 with every violation grouped by field name,
       which a plain rule table reports more directly than schema parsing.
How:   validate_payload() walks POST_RULES, collects messages per field and
       raises ValidationError once at the end; on success it returns only
       the known fields, so unknown keys (id, timestamps, ...) never reach
       the model.

Rules:
    title     required on create, string, at most 120 characters
    content   required on create, string
    category  required on create, string
    tags      optional list; each element a string of 4 to 20 characters

In partial (update) mode a missing field is skipped; a field that IS present
must still satisfy its rule, including being non-empty.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from posts_api.exceptions import ValidationError

INVALID_INPUT_MESSAGE = "Invalid input"


@dataclass(frozen=True)
class FieldRule:
    """One row of the rule table."""

    required: bool = False
    kind: type = str
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    # Rule applied to each element when kind is list
    item: Optional["FieldRule"] = None


POST_RULES: Dict[str, FieldRule] = {
    "title": FieldRule(required=True, kind=str, max_length=120),
    "content": FieldRule(required=True, kind=str),
    "category": FieldRule(required=True, kind=str),
    "tags": FieldRule(
        required=False,
        kind=list,
        item=FieldRule(kind=str, min_length=4, max_length=20),
    ),
}

_TYPE_NAMES = {str: "a string", list: "an array"}


def _is_blank(value: Any) -> bool:
    # Whitespace-only strings count as missing
    return value is None or (isinstance(value, str) and value.strip() == "")


def _check_value(label: str, value: Any, rule: FieldRule) -> List[str]:
    """Returns the violation messages of a single non-blank value."""
    if not isinstance(value, rule.kind) or isinstance(value, bool):
        return [f"The {label} field must be {_TYPE_NAMES.get(rule.kind, rule.kind.__name__)}."]

    messages: List[str] = []
    if rule.kind is str:
        if rule.min_length is not None and len(value) < rule.min_length:
            messages.append(
                f"The {label} field must be at least {rule.min_length} characters."
            )
        if rule.max_length is not None and len(value) > rule.max_length:
            messages.append(
                f"The {label} field must not be greater than {rule.max_length} characters."
            )
    elif rule.kind is list and rule.item is not None:
        for index, element in enumerate(value):
            messages.extend(_check_value(f"{label}.{index}", element, rule.item))
    return messages


def validate_payload(
    payload: Any,
    partial: bool = False,
    rules: Mapping[str, FieldRule] = POST_RULES,
) -> Dict[str, Any]:
    """
    Validate a post body against the rule table.

    Args:
        payload: Decoded JSON body; anything but an object is rejected
        partial: True for updates (every field optional, present ones checked)
        rules:   Rule table to apply (defaults to POST_RULES)

    Returns:
        Dict holding only the fields named in `rules` that were supplied.
        On create, a missing or null `tags` comes back as an empty list.

    Raises:
        ValidationError: message "Invalid input" with a field → messages map
    """
    if not isinstance(payload, Mapping):
        raise ValidationError(
            message=INVALID_INPUT_MESSAGE,
            errors={"body": ["The request body must be a JSON object."]},
        )

    errors: Dict[str, List[str]] = {}
    cleaned: Dict[str, Any] = {}

    for field, rule in rules.items():
        present = field in payload
        value = payload.get(field)

        if rule.kind is list and value is None:
            # A null list counts as "no elements"
            if present or not partial:
                cleaned[field] = []
            continue

        if not present and partial:
            continue

        if _is_blank(value):
            if rule.required or present:
                errors[field] = [f"The {field} field is required."]
            continue

        messages = _check_value(field, value, rule)
        if messages:
            errors[field] = messages
        else:
            cleaned[field] = list(value) if rule.kind is list else value

    if errors:
        raise ValidationError(message=INVALID_INPUT_MESSAGE, errors=errors)
    return cleaned
