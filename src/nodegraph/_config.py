"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

from ._engine import ReplacePolicy
from ._errors import GraphError


class ConfigError(GraphError):
    """Error in nodegraph configuration."""


@dataclass(slots=True, frozen=True)
class GraphConfig:
    """Configuration loaded from the [tool.nodegraph] table of pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    replace_policy: ReplacePolicy = ReplacePolicy.REJECT
    nodes: Path | None = None
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _parse_replace_policy(value: object) -> ReplacePolicy:
    if not isinstance(value, str):
        msg = "Invalid [tool.nodegraph].replace-policy: expected string"
        raise ConfigError(msg)
    try:
        return ReplacePolicy(value)
    except ValueError:
        choices = ", ".join(f"'{policy}'" for policy in ReplacePolicy)
        msg = f"Invalid [tool.nodegraph].replace-policy '{value}'. Expected one of: {choices}"
        raise ConfigError(msg) from None


def load_config(pyproject_path: Path) -> GraphConfig:
    """Load and validate [tool.nodegraph] config from pyproject.toml.

    Recognized keys:
        replace-policy: "reject" (default) or "add".
        nodes: Default node file used by the CLI.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed GraphConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("nodegraph", {})

    if not section:
        return GraphConfig(project_root=project_root)

    replace_policy = ReplacePolicy.REJECT
    if "replace-policy" in section:
        replace_policy = _parse_replace_policy(section["replace-policy"])

    nodes_path: Path | None = None
    if "nodes" in section:
        nodes_value = section["nodes"]
        if not isinstance(nodes_value, str):
            msg = "Invalid [tool.nodegraph].nodes: expected string path"
            raise ConfigError(msg)
        nodes_path = Path(nodes_value)
        if not nodes_path.is_absolute():
            nodes_path = project_root / nodes_path

    return GraphConfig(
        replace_policy=replace_policy,
        nodes=nodes_path,
        project_root=project_root,
    )


def get_config() -> GraphConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        GraphConfig (may be empty if no pyproject.toml or no [tool.nodegraph] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return GraphConfig()
    return load_config(pyproject_path)
