"""Tests for the configuration module."""

from pathlib import Path

import pytest

from mathexpr._cli.config import (
    ConfigError,
    MathexprConfig,
    find_pyproject_toml,
    get_config,
    load_config,
)


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
    """Tests for loading [tool.mathexpr]."""

    def test_no_section(self, tmp_path: Path) -> None:
        """Should return an empty config when [tool.mathexpr] is absent."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        config = load_config(pyproject)

        assert config == MathexprConfig(project_root=tmp_path)

    def test_all_keys(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.mathexpr]
resolution = 101
strict = true
output = "out/sweep.toml"
""",
        )

        config = load_config(pyproject)

        assert config.resolution == 101
        assert config.strict is True
        assert config.output == tmp_path / "out" / "sweep.toml"
        assert config.project_root == tmp_path

    def test_absolute_output(self, tmp_path: Path) -> None:
        output = tmp_path / "elsewhere" / "sweep.toml"
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(f'[tool.mathexpr]\noutput = "{output.as_posix()}"\n')

        config = load_config(pyproject)

        assert config.output == output

    @pytest.mark.parametrize(
        ("body", "match"),
        [
            ('resolution = "many"', "resolution: expected integer"),
            ("resolution = true", "resolution: expected integer"),
            ("resolution = 1", "at least 2"),
            ('strict = "yes"', "strict: expected boolean"),
            ("output = 3", "output: expected string path"),
        ],
    )
    def test_invalid_values(self, tmp_path: Path, body: str, match: str) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(f"[tool.mathexpr]\n{body}\n")

        with pytest.raises(ConfigError, match=match):
            load_config(pyproject)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.mathexpr\n")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(pyproject)


class TestGetConfig:
    def test_reads_from_working_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.mathexpr]\nresolution = 11\n")
        monkeypatch.chdir(tmp_path)

        assert get_config().resolution == 11
