"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path


class ConfigError(Exception):
    """Error in mathexpr configuration."""


@dataclass(slots=True, frozen=True)
class MathexprConfig:
    """Configuration loaded from the `[tool.mathexpr]` table of pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    resolution: int | None = None
    strict: bool = False
    output: Path | None = None
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


def _parse_resolution(value: object) -> int:
    # bool is an int subclass but never a sample count
    if isinstance(value, bool) or not isinstance(value, int):
        msg = "Invalid [tool.mathexpr].resolution: expected integer"
        raise ConfigError(msg)
    if value < 2:  # noqa: PLR2004
        msg = f"Invalid [tool.mathexpr].resolution: must be at least 2, got {value}"
        raise ConfigError(msg)
    return value


def load_config(pyproject_path: Path) -> MathexprConfig:
    """Load and validate [tool.mathexpr] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed MathexprConfig

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

    section = data.get("tool", {}).get("mathexpr", {})

    if not section:
        return MathexprConfig(project_root=project_root)

    resolution: int | None = None
    if "resolution" in section:
        resolution = _parse_resolution(section["resolution"])

    strict = section.get("strict", False)
    if not isinstance(strict, bool):
        msg = "Invalid [tool.mathexpr].strict: expected boolean"
        raise ConfigError(msg)

    output_path: Path | None = None
    if "output" in section:
        output_value = section["output"]
        if not isinstance(output_value, str):
            msg = "Invalid [tool.mathexpr].output: expected string path"
            raise ConfigError(msg)
        output_path = Path(output_value)
        if not output_path.is_absolute():
            output_path = project_root / output_path

    return MathexprConfig(
        resolution=resolution,
        strict=strict,
        output=output_path,
        project_root=project_root,
    )


def get_config() -> MathexprConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        MathexprConfig (may be empty if no pyproject.toml or no [tool.mathexpr] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return MathexprConfig()
    return load_config(pyproject_path)
