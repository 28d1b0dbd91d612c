"""Tests for the YAML contacts loader."""

from __future__ import annotations

from datetime import date

import pytest

from tend.domains.garden.connectors.loader import load_contacts_file
from tend.domains.garden.domain_logic.errors import ContactParseError


def _write(tmp_path, text: str):
    path = tmp_path / "contacts.yaml"
    path.write_text(text)
    return path


def test_parses_contacts_and_velocity(tmp_path):
    path = _write(tmp_path, """
velocity: 1.5
contacts:
  - id: a
    name: Ada
    last_interaction_date: 2026-02-01
    target_frequency_days: 14
  - id: b
    name: Bob
    last_interaction_date:
    importance: low
""")
    contacts, velocity = load_contacts_file(path)
    assert velocity == 1.5
    assert contacts[0].last_interaction_date == date(2026, 2, 1)
    assert contacts[1].last_interaction_date is None
    assert contacts[1].importance == "low"


def test_empty_file_has_no_contacts(tmp_path):
    assert load_contacts_file(_write(tmp_path, "")) == ([], 0.0)


def test_rejects_non_mapping(tmp_path):
    with pytest.raises(ContactParseError):
        load_contacts_file(_write(tmp_path, "- a\n- b\n"))


def test_rejects_non_list_contacts(tmp_path):
    with pytest.raises(ContactParseError):
        load_contacts_file(_write(tmp_path, "contacts: nope\n"))


def test_rejects_duplicate_ids(tmp_path):
    with pytest.raises(ContactParseError):
        load_contacts_file(_write(tmp_path, "contacts:\n  - id: a\n  - id: a\n"))


def test_rejects_malformed_date(tmp_path):
    with pytest.raises(ContactParseError):
        load_contacts_file(_write(tmp_path, "contacts:\n  - id: a\n    last_interaction_date: soon\n"))


def test_rejects_bad_velocity(tmp_path):
    with pytest.raises(ContactParseError):
        load_contacts_file(_write(tmp_path, "velocity: fast\ncontacts: []\n"))
