"""Parsing of free-text payment instructions and location blocks."""

import re
from typing import Optional

from timebill.domain.entities import PaymentInstructionFields

_KEYED_LINE = re.compile(r"^([^:]+):\s*(.+)$")

# Unlabeled lines fill whichever of these are still empty, in this order.
_POSITIONAL_FIELDS = ("bank", "account_name", "routing_number", "account_number")

_KEY_ALIASES = {
    "bank": "bank",
    "account name": "account_name",
    "account": "account_name",
    "routing number": "routing_number",
    "routing": "routing_number",
    "account number": "account_number",
}


def _clean_lines(text: Optional[str]) -> list[str]:
    if not text:
        return []
    lines = (line.strip() for line in re.split(r"\r?\n", text))
    return [line for line in lines if line]


def split_location_lines(text: Optional[str], limit: int) -> list[str]:
    """Split a multi-line location block into at most ``limit`` non-empty lines."""
    return _clean_lines(text)[:limit]


def parse_payment_instructions(text: Optional[str]) -> PaymentInstructionFields:
    """Parse payment instructions into bank details.

    Lines of the form ``Key: value`` are matched case-insensitively against
    known keys (bank, account name / account, routing number / routing,
    account number). Unknown keys are kept as extra lines. Lines without a
    key fill the remaining empty fields in order; anything beyond that is
    kept as extra lines.

    Args:
        text: Free-text payment instructions

    Returns:
        Parsed fields; all empty when text is blank
    """
    fields = {name: "" for name in _POSITIONAL_FIELDS}
    extra_lines: list[str] = []
    unkeyed_lines: list[str] = []

    for line in _clean_lines(text):
        match = _KEYED_LINE.match(line)
        if match is None:
            unkeyed_lines.append(line)
            continue

        key = match.group(1).strip().lower()
        value = match.group(2).strip()
        if not value:
            continue

        field_name = _KEY_ALIASES.get(key)
        if field_name is None:
            extra_lines.append(line)
        else:
            fields[field_name] = value

    next_index = 0
    for line in unkeyed_lines:
        while (
            next_index < len(_POSITIONAL_FIELDS)
            and fields[_POSITIONAL_FIELDS[next_index]] != ""
        ):
            next_index += 1
        if next_index < len(_POSITIONAL_FIELDS):
            fields[_POSITIONAL_FIELDS[next_index]] = line
            next_index += 1
        else:
            extra_lines.append(line)

    return PaymentInstructionFields(extra_lines=tuple(extra_lines), **fields)
