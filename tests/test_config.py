"""Tests for the configuration module."""

from pathlib import Path

import pytest

from nodegraph._config import (
    ConfigError,
    GraphConfig,
    find_pyproject_toml,
    get_config,
    load_config,
)
from nodegraph._engine import ReplacePolicy


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml function."""

    def test_finds_in_current_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in current directory."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        result = find_pyproject_toml(tmp_path)

        assert result == pyproject

    def test_finds_in_parent_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in parent directory."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        subdir = tmp_path / "src" / "pkg"
        subdir.mkdir(parents=True)

        result = find_pyproject_toml(subdir)

        assert result == pyproject


class TestLoadConfig:
    def test_no_section_gives_defaults(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        config = load_config(pyproject)

        assert config == GraphConfig(project_root=tmp_path)
        assert config.replace_policy is ReplacePolicy.REJECT

    def test_replace_policy(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.nodegraph]
replace-policy = "add"
""",
        )

        config = load_config(pyproject)

        assert config.replace_policy is ReplacePolicy.ADD

    def test_invalid_replace_policy(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.nodegraph]
replace-policy = "merge"
""",
        )

        with pytest.raises(ConfigError, match="'reject', 'add'"):
            load_config(pyproject)

    def test_replace_policy_must_be_string(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.nodegraph]\nreplace-policy = true\n")

        with pytest.raises(ConfigError, match="expected string"):
            load_config(pyproject)

    def test_relative_nodes_path_resolved_from_project_root(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.nodegraph]
nodes = "graphs/build.toml"
""",
        )

        config = load_config(pyproject)

        assert config.nodes == tmp_path / "graphs" / "build.toml"

    def test_absolute_nodes_path_kept(self, tmp_path: Path) -> None:
        nodes_path = tmp_path / "elsewhere" / "graph.toml"
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(f"[tool.nodegraph]\nnodes = '{nodes_path.as_posix()}'\n")

        config = load_config(pyproject)

        assert config.nodes == nodes_path

    def test_nodes_path_must_be_string(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.nodegraph]\nnodes = 42\n")

        with pytest.raises(ConfigError, match="expected string path"):
            load_config(pyproject)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.nodegraph\n")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(pyproject)


class TestGetConfig:
    def test_reads_config_from_working_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.nodegraph]\nreplace-policy = 'add'\n")
        monkeypatch.chdir(tmp_path)

        config = get_config()

        assert config.replace_policy is ReplacePolicy.ADD
        assert config.project_root == tmp_path.resolve()
