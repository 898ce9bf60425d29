"""Domain value objects."""

from accessguard.domain.value_objects.action_type import CRUD_ACTION_TYPES, ActionType
from accessguard.domain.value_objects.element_action import ElementAction
from accessguard.domain.value_objects.element_path import (
    DEFAULT_NAMESPACE,
    WILDCARD,
    candidate_patterns,
    normalize_element_path,
    pattern_matches,
)
from accessguard.domain.value_objects.evaluation_context import EvaluationContext
from accessguard.domain.value_objects.override_type import OverrideType
from accessguard.domain.value_objects.tenant_match import TenantMatch

__all__ = [
    "CRUD_ACTION_TYPES",
    "DEFAULT_NAMESPACE",
    "ActionType",
    "ElementAction",
    "EvaluationContext",
    "OverrideType",
    "TenantMatch",
    "WILDCARD",
    "candidate_patterns",
    "normalize_element_path",
    "pattern_matches",
]
