"""Error taxonomy: operator/configuration failures vs. bad caller input."""

from typing import Any, Dict


class WrkrError(Exception):
    """Base class for errors surfaced by the decision pipeline."""

    code = "runtime_failure"
    exit_code = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": str(self),
                "exit_code": self.exit_code,
            }
        }


class CatalogError(WrkrError):
    """Malformed or incomplete rule, template or profile catalog."""


class InvalidInputError(WrkrError):
    """Observation input that cannot be read or decoded at all."""

    code = "invalid_input"
    exit_code = 6
