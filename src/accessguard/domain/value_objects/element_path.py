"""Element path normalization and candidate pattern expansion."""

import re
from functools import lru_cache

DEFAULT_NAMESPACE = "crm"
WILDCARD = "*"


def normalize_element_path(element_path: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    """Prefix the module namespace unless the path already carries it."""
    path = element_path.strip()
    prefix = f"{namespace}:"
    if path == namespace or path.startswith(prefix):
        return path
    return f"{prefix}{path}"


def candidate_patterns(
    element_path: str,
    action: str,
    namespace: str = DEFAULT_NAMESPACE,
) -> list[str]:
    """Permission names to try for (path, action), most specific first.

    Order: element+action, bare element, module:resource:view:*,
    module:resource:*, any element with this action, full wildcard.
    Duplicates keep their first position.
    """
    path = normalize_element_path(element_path, namespace)
    segments = [s for s in path.split(":") if s]

    candidates = [f"{path}:{action}", path]
    if len(segments) >= 3:
        candidates.append(":".join(segments[:3]) + f":{WILDCARD}")
    if len(segments) >= 2:
        candidates.append(":".join(segments[:2]) + f":{WILDCARD}")
    candidates.append(f"{namespace}:{WILDCARD}:{action}")
    candidates.append(f"{namespace}:{WILDCARD}")
    return list(dict.fromkeys(candidates))


@lru_cache(maxsize=1024)
def _compile(permission_name: str) -> re.Pattern[str]:
    escaped = re.escape(permission_name).replace(re.escape(WILDCARD), ".*")
    return re.compile(f"^{escaped}$")


def pattern_matches(permission_name: str, candidate: str) -> bool:
    """True if the permission name, with `*` as a wildcard, covers the candidate."""
    return _compile(permission_name).match(candidate) is not None
