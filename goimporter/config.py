"""Repository configuration loading for goimporter.

Configuration comes from built-in defaults, an optional JSON or TOML file
and command-line overrides, applied in that order.
"""

import dataclasses
import json
import logging
import tomllib
from pathlib import Path
from typing import Any
from typing import Dict
from typing import Iterable
from typing import List
from typing import Optional

from goimporter.entities import RepoConfig
from goimporter.rules import extract_domain

LOG = logging.getLogger(__name__)

DEFAULT_REPO_CONFIG = RepoConfig(
    org_prefix="github.com/myorg",
    repo_prefix="github.com/myorg/myrepo",
    common_prefix="github.com/myorg/myrepo/pkg",
    domain_prefix="github.com/myorg/myrepo/projects/domain/pkg",
    projects_template="github.com/myorg/myrepo/projects/domain/%s",
)

_STRING_KEYS = ("org_prefix", "repo_prefix", "common_prefix", "domain_prefix", "projects_template")
_LIST_KEYS = ("additional_common_prefixes",)


class ConfigError(Exception):
    """The configuration file is unreadable or malformed."""


def _read_config_data(path: Path) -> Dict[str, Any]:
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ConfigError(f"reading config file {path}: {e}") from e

    if path.suffix == ".toml":
        try:
            data = tomllib.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"parsing config file {path}: {e}") from e
        # pyproject-style files keep the settings under [tool.goimporter]
        data = data.get("tool", {}).get("goimporter", data)
    else:
        try:
            data = json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ConfigError(f"parsing config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain an object, got {type(data).__name__}")
    return data


def load_repo_config(path, base: RepoConfig = DEFAULT_REPO_CONFIG) -> RepoConfig:
    """Load a repository configuration from a JSON or TOML file.

    Keys missing from the file keep their value from base.

    Raises:
        ConfigError: If the file cannot be read or holds invalid values.
    """
    path = Path(path)
    data = _read_config_data(path)

    values: Dict[str, Any] = {}
    for key, value in data.items():
        if key in _STRING_KEYS:
            if not isinstance(value, str):
                raise ConfigError(f"{path}: {key} must be a string")
            values[key] = value
        elif key in _LIST_KEYS:
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"{path}: {key} must be a list of strings")
            values[key] = tuple(value)
        else:
            LOG.warning("%s: unknown config key %r ignored", path, key)

    LOG.debug("Loaded config from %s", path)
    return dataclasses.replace(base, **values)


def build_repo_config(
    base: RepoConfig = DEFAULT_REPO_CONFIG,
    extra_common_prefixes: Iterable[str] = (),
    **overrides: Optional[str],
) -> RepoConfig:
    """Apply explicitly given values over base; None means not given."""
    values: Dict[str, Any] = {k: v for k, v in overrides.items() if v is not None}
    extra = [p for p in extra_common_prefixes if p]
    if extra:
        values["additional_common_prefixes"] = base.additional_common_prefixes + tuple(extra)
    return dataclasses.replace(base, **values)


def check_repo_config(repo: RepoConfig) -> List[str]:
    """Return warnings about settings that silently disable project grouping."""
    warnings: List[str] = []
    if repo.projects_template.count("%s") != 1:
        warnings.append(f"projects template {repo.projects_template!r} should contain exactly one %s placeholder")
    if not extract_domain(repo.projects_template):
        warnings.append(
            f"projects template {repo.projects_template!r} has no projects/<domain> segment, "
            "project imports will not be grouped"
        )
    return warnings
