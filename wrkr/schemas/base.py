# wrkr/schemas/base.py
import json
from typing import Any, Dict

from pydantic import BaseModel


class WrkrModel(BaseModel):
    """Base for every serialized pipeline record: absent optionals are omitted."""

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

    def to_json(self) -> str:
        return dump_json(self.to_dict())


def dump_json(payload: Any) -> str:
    """Stable JSON text: indented, key-sorted, trailing newline."""
    return json.dumps(payload, indent=2, sort_keys=True) + "\n"
