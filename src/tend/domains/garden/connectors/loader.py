"""Contacts loader — reads a YAML garden seed file from disk.

Expected shape::

    velocity: 2.0          # optional, new/reactivated contacts per horizon
    contacts:
      - id: c-ada
        name: Ada Lovelace
        last_interaction_date: 2026-01-15
        target_frequency_days: 14
        importance: high
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from tend.domains.garden.domain_logic.errors import ContactParseError
from tend.domains.garden.domain_logic.garden_models import Contact

logger = logging.getLogger(__name__)


def load_contacts_file(path: str | Path) -> tuple[list[Contact], float]:
    """Parse a YAML seed file into contacts and a velocity estimate.

    Raises:
        ContactParseError: The file is not a mapping, ``contacts`` is not a
            list, or any record is malformed.
    """
    path = Path(path)
    with open(path) as f:
        data: Any = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ContactParseError(f"{path}: expected a mapping at the top level")

    records = data.get("contacts", [])
    if not isinstance(records, list):
        raise ContactParseError(f"{path}: 'contacts' must be a list")

    contacts = []
    seen: set[str] = set()
    for record in records:
        if not isinstance(record, dict):
            raise ContactParseError(f"{path}: contact entries must be mappings")
        contact = Contact.from_dict(record)
        if contact.id in seen:
            raise ContactParseError(f"{path}: duplicate contact id {contact.id!r}")
        seen.add(contact.id)
        contacts.append(contact)

    try:
        velocity = float(data.get("velocity", 0.0))
    except (TypeError, ValueError) as exc:
        raise ContactParseError(f"{path}: 'velocity' must be a number") from exc

    logger.info("Loaded %d contacts from %s", len(contacts), path)
    return contacts, velocity
