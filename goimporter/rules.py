"""Rules module for goimporter.

This module defines the rules that sort import paths into the seven import
groups: standard library, external, common organization packages, domain
packages, other repository packages, project pkg and project internal
packages.

The current project is inferred from the imports themselves: the first path
below ``/projects/<domain>/`` that reaches into a ``pkg`` or ``internal``
tree names it.
"""

import logging
from typing import Callable
from typing import Iterable
from typing import List
from typing import NamedTuple
from typing import Optional
from typing import Sequence
from typing import Set
from typing import Tuple

from goimporter import entities
from goimporter.entities import Import
from goimporter.entities import ImportGroups
from goimporter.entities import RepoConfig

LOG = logging.getLogger(__name__)


class ProjectPrefixes(NamedTuple):
    """Prefixes of the project the imports belong to."""

    prefix: str
    pkg_prefix: str
    internal_prefix: str


Rule = Callable[[str, RepoConfig, Optional[ProjectPrefixes]], bool]


def extract_domain(template: str) -> str:
    """Return the path component following ``projects`` in a template."""
    parts = template.split("/")
    for i, part in enumerate(parts):
        if i > 0 and part == "projects" and i + 1 < len(parts):
            return parts[i + 1]
    return ""


def has_prefix_any(path: str, prefixes: Iterable[str]) -> bool:
    return any(path.startswith(prefix) for prefix in prefixes)


def detect_project(imports: Sequence[Import], repo: RepoConfig) -> Optional[ProjectPrefixes]:
    """Infer the current project from the first project-looking import.

    The component after the domain segment is the project name, unless it
    is ``pkg``: ``projects/<domain>/pkg`` is the domain common tree, not a
    project.
    """
    domain = extract_domain(repo.projects_template)
    if not domain:
        return None

    marker = f"/projects/{domain}/"
    for imp in imports:
        path = imp.path
        if marker not in path:
            continue
        if "/internal/" not in path and "/pkg/" not in path:
            continue
        parts = path.split("/")
        for i, part in enumerate(parts[:-1]):
            if part == domain and parts[i + 1] != "pkg":
                prefix = "/".join(parts[:i + 2])
                LOG.debug("project %r detected from %s", parts[i + 1], path)
                return ProjectPrefixes(prefix, prefix + "/pkg", prefix + "/internal")
    return None


def _is_stdlib(path: str, repo: RepoConfig, project: Optional[ProjectPrefixes]) -> bool:
    return "." not in path


def _is_external(path: str, repo: RepoConfig, project: Optional[ProjectPrefixes]) -> bool:
    return not path.startswith(repo.org_prefix)


def _is_org_common(path: str, repo: RepoConfig, project: Optional[ProjectPrefixes]) -> bool:
    # Anything in the organization outside this repository counts as common.
    return (
        path.startswith(repo.common_prefix)
        or has_prefix_any(path, repo.additional_common_prefixes)
        or (path.startswith(repo.org_prefix) and not path.startswith(repo.repo_prefix))
    )


def _is_domain_common(path: str, repo: RepoConfig, project: Optional[ProjectPrefixes]) -> bool:
    return path.startswith(repo.domain_prefix)


def _is_project_pkg(path: str, repo: RepoConfig, project: Optional[ProjectPrefixes]) -> bool:
    return project is not None and path.startswith(project.prefix) and "/pkg/" in path


def _is_project_internal(path: str, repo: RepoConfig, project: Optional[ProjectPrefixes]) -> bool:
    return project is not None and path.startswith(project.prefix) and "/internal/" in path


# First match wins; paths matching none of them are other repository packages.
RULES: Tuple[Tuple[str, Rule], ...] = (
    (entities.STDLIB, _is_stdlib),
    (entities.EXTERNAL, _is_external),
    (entities.ORG_COMMON, _is_org_common),
    (entities.DOMAIN_COMMON, _is_domain_common),
    (entities.PROJECT_PKG, _is_project_pkg),
    (entities.PROJECT_INTERNAL, _is_project_internal),
)


def classify_import(path: str, repo: RepoConfig, project: Optional[ProjectPrefixes] = None) -> str:
    """Return the name of the group an import path belongs to."""
    for group, rule in RULES:
        if rule(path, repo, project):
            return group
    return entities.REPO_OTHER


def dedupe_imports(imports: Iterable[Import]) -> List[Import]:
    """Drop imports whose path was already seen, keeping the first alias."""
    seen: Set[str] = set()
    unique: List[Import] = []
    for imp in imports:
        if imp.path in seen:
            LOG.debug("duplicate import %s dropped", imp.path)
            continue
        seen.add(imp.path)
        unique.append(imp)
    return unique


def classify(imports: Sequence[Import], repo: RepoConfig) -> ImportGroups:
    """Split imports into sorted, duplicate-free groups.

    Args:
        imports: Imports in their original order.
        repo: Repository layout to classify against.

    Returns:
        The seven groups, each sorted by path.
    """
    project = detect_project(imports, repo)
    groups = ImportGroups()
    for imp in dedupe_imports(imports):
        groups.group(classify_import(imp.path, repo, project)).append(imp)
    for _, group in groups:
        group.sort(key=lambda imp: imp.path)
    return groups
