"""Data types shared by the parser, the classifier and the rewriter."""

from __future__ import annotations
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Iterator
from typing import List
from typing import Tuple


STDLIB = "stdlib"
EXTERNAL = "external"
ORG_COMMON = "org_common"
DOMAIN_COMMON = "domain_common"
REPO_OTHER = "repo_other"
PROJECT_PKG = "project_pkg"
PROJECT_INTERNAL = "project_internal"

# Emission order inside the rewritten import block. Project pkg code is
# lower level than project internal code, so it goes first.
GROUP_ORDER = (
    STDLIB,
    EXTERNAL,
    ORG_COMMON,
    DOMAIN_COMMON,
    REPO_OTHER,
    PROJECT_PKG,
    PROJECT_INTERNAL,
)


@dataclass(frozen=True)
class Import:
    """A single import declaration: optional alias plus the quoted path."""

    path: str
    alias: str = ""

    def render(self) -> str:
        if self.alias:
            return f'{self.alias} "{self.path}"'
        return f'"{self.path}"'


@dataclass
class ImportGroups:
    """Imports partitioned into the seven ordered groups."""

    stdlib: List[Import] = field(default_factory=list)
    external: List[Import] = field(default_factory=list)
    org_common: List[Import] = field(default_factory=list)
    domain_common: List[Import] = field(default_factory=list)
    repo_other: List[Import] = field(default_factory=list)
    project_pkg: List[Import] = field(default_factory=list)
    project_internal: List[Import] = field(default_factory=list)

    def group(self, name: str) -> List[Import]:
        if name not in GROUP_ORDER:
            raise KeyError(name)
        return getattr(self, name)

    def __iter__(self) -> Iterator[Tuple[str, List[Import]]]:
        for name in GROUP_ORDER:
            yield name, getattr(self, name)

    def paths(self) -> List[str]:
        """Return every path in emission order."""
        return [imp.path for _, imports in self for imp in imports]


@dataclass(frozen=True)
class RepoConfig:
    """Organization and repository layout used to classify import paths.

    Attributes:
        org_prefix: Organization prefix, e.g. "github.com/myorg".
        repo_prefix: Repository prefix, e.g. "github.com/myorg/myrepo".
        common_prefix: Common packages prefix, e.g. "github.com/myorg/myrepo/pkg".
        domain_prefix: Domain packages prefix,
            e.g. "github.com/myorg/myrepo/projects/domain/pkg".
        projects_template: Template for project roots with one "%s"
            placeholder, e.g. "github.com/myorg/myrepo/projects/domain/%s".
        additional_common_prefixes: Extra prefixes grouped with the common
            organization packages.
    """

    org_prefix: str
    repo_prefix: str
    common_prefix: str
    domain_prefix: str
    projects_template: str
    additional_common_prefixes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RunConfig:
    """What to process and how, as requested on the command line."""

    target: Path
    recursive: bool = False
    dry_run: bool = False
    exclude_mock: bool = True
