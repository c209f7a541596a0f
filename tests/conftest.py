# File: tests/conftest.py
# Contains pytest fixtures shared by registry and CLI tests.

from pathlib import Path

import pytest
import yaml


PERSON_MODEL = {
    "name": "Person",
    "fields": {
        "ID": {"type": "AutoIncrement"},
        "Email": {"type": "String"},
        "LastName": {"type": "String"},
        "Nationality": {"type": "Nationality"},
    },
    "identifiers": {
        "primary": "ID",
        "email": ["Email"],
    },
    "related": {
        "Company": {"type": "ForOne"},
        "Tag": {"type": "ForMany"},
    },
}

COMPANY_MODEL = {
    "name": "Company",
    "fields": {
        "ID": {"type": "AutoIncrement"},
        "Name": {"type": "String"},
    },
    "identifiers": {"primary": "ID"},
    "related": {"Person": {"type": "HasMany"}},
}

TAG_MODEL = {
    "name": "Tag",
    "fields": {
        "ID": {"type": "AutoIncrement"},
        "Label": {"type": "String"},
    },
    "identifiers": {"primary": "ID"},
}

NATIONALITY_ENUM = {
    "name": "Nationality",
    "type": "String",
    "entries": {"US": "American", "DE": "German"},
}


def _write_yaml(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False)


@pytest.fixture
def registry_dir(tmp_path: Path) -> Path:
    """
    Writes a small registry (Person, Company, Tag, Nationality) to a
    temporary directory and returns its path.
    """
    root = tmp_path / "registry"
    _write_yaml(root / "models" / "person.yaml", PERSON_MODEL)
    _write_yaml(root / "models" / "company.yaml", COMPANY_MODEL)
    _write_yaml(root / "models" / "tag.yml", TAG_MODEL)
    _write_yaml(root / "enums" / "nationality.yaml", NATIONALITY_ENUM)
    return root


@pytest.fixture
def write_yaml():
    """Expose the YAML writer so tests can add their own definition files."""
    return _write_yaml
