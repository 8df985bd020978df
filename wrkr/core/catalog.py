# wrkr/core/catalog.py
"""
Read-only catalogs (rules, remediation templates, compliance profiles).

Built once at process start and passed explicitly to the evaluator, the
profile evaluator and the planner.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from wrkr.policy.loader import load_override_documents, load_rules
from wrkr.policy.profiles import load_profiles, select_profile
from wrkr.remediation.templates import Template, load_templates
from wrkr.schemas.policy import Profile, Rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Catalogs:
    rules: List[Rule] = field(default_factory=list)
    templates: Dict[str, Template] = field(default_factory=dict)
    profiles: Dict[str, Profile] = field(default_factory=dict)

    @classmethod
    def load(cls, policy_path: Optional[str] = None, repo_root: Optional[str] = None) -> "Catalogs":
        """Load embedded packs and apply overrides; raises CatalogError on any problem."""
        overrides = load_override_documents(policy_path, repo_root)
        catalogs = cls(
            rules=load_rules(overrides),
            templates=load_templates(),
            profiles=load_profiles(overrides),
        )
        logger.info(
            "Catalogs loaded",
            extra={
                "rules": len(catalogs.rules),
                "templates": len(catalogs.templates),
                "profiles": len(catalogs.profiles),
                "overrides": [source for source, _ in overrides],
            },
        )
        return catalogs

    def profile(self, name: Optional[str] = None) -> Profile:
        return select_profile(self.profiles, name)
