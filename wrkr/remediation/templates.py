# wrkr/remediation/templates.py
"""Embedded remediation template catalog."""
from pathlib import Path
from typing import Any, Dict, List

from pydantic import field_validator

from wrkr.core.errors import CatalogError
from wrkr.core.jsonvalue import as_list, as_map, as_string_list, scalar_string
from wrkr.policy.loader import read_yaml_document
from wrkr.schemas.base import WrkrModel

TEMPLATES_PATH = Path(__file__).parent / "templates" / "templates.yaml"
REQUIRED_FIELDS = ("id", "category", "title", "commit_prefix")


class Template(WrkrModel):
    id: str
    category: str
    title: str
    commit_prefix: str
    hints: List[str] = []

    @field_validator("hints", mode="before")
    @classmethod
    def normalize_hints(cls, v):
        return sorted({h.strip() for h in as_string_list(v) or [] if h.strip()})


def parse_templates(document: Dict[str, Any], source: str) -> Dict[str, Template]:
    entries = as_list(document.get("templates")) or []
    if not entries:
        raise CatalogError(f"parse remediation templates {source}: empty catalog")

    templates: Dict[str, Template] = {}
    for entry in entries:
        fields = as_map(entry)
        if fields is None:
            raise CatalogError(f"parse remediation templates {source}: entries must be mappings")
        values = {key: (scalar_string(fields.get(key)) or "").strip() for key in REQUIRED_FIELDS}
        if not all(values.values()):
            raise CatalogError(f"parse remediation templates {source}: template missing required fields")
        if values["id"] in templates:
            raise CatalogError(f"parse remediation templates {source}: duplicate template id {values['id']}")
        templates[values["id"]] = Template(hints=fields.get("hints"), **values)
    return dict(sorted(templates.items()))


def load_templates() -> Dict[str, Template]:
    """Template catalog keyed by template id."""
    document = read_yaml_document(TEMPLATES_PATH, "remediation templates")
    return parse_templates(document, TEMPLATES_PATH.name)
