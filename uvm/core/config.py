"""Typed configuration loading.

Configuration lives in ``uvm.toml`` at the project root, or in the
``[tool.uvm]`` table of ``pyproject.toml``:

    version = "0.4.2"
    install_dir = "_python"
    # path = "/usr/local/bin/uv"      # use this binary, never auto-install
    # cacertfile = "certs/corp.pem"   # CA bundle for the release download

    [profiles.default]
    args = []
    cd = "."
    env = { UV_NO_CACHE = "1" }

Relative paths are resolved against the directory containing the file.
The resulting ``Config`` is passed explicitly to every service; there is
no process-wide settings store.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_str_map, get_table

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_INSTALL_DIR",
    "DEFAULT_PROFILE",
    "DEFAULT_VERSION",
    "Config",
    "ConfigError",
    "Profile",
    "find_config",
    "load_config",
    "load_project_config",
]

# https://github.com/astral-sh/uv/releases
DEFAULT_VERSION = "0.4.2"
DEFAULT_INSTALL_DIR = "_python"
DEFAULT_PROFILE = "default"
CONFIG_FILENAME = "uvm.toml"
PYPROJECT_FILENAME = "pyproject.toml"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.message} ({self.path})"
        return self.message


@dataclass(frozen=True, slots=True)
class Profile:
    """How uv is invoked for one named profile.

    Attributes:
        args: Arguments placed before any caller-supplied arguments
        cd: Working directory (None: the caller's current directory)
        env: Variables overlaid on the parent environment
    """

    args: tuple[str, ...] = ()
    cd: Path | None = None
    env: dict[str, str] = field(default_factory=dict)


def _default_profiles() -> dict[str, Profile]:
    return {DEFAULT_PROFILE: Profile()}


@dataclass(frozen=True, slots=True)
class Config:
    """Project configuration."""

    root: Path
    version: str = DEFAULT_VERSION
    path: Path | None = None
    install_dir: str = DEFAULT_INSTALL_DIR
    cacertfile: Path | None = None
    profiles: dict[str, Profile] = field(default_factory=_default_profiles)

    def profile(self, name: str) -> Profile | None:
        return self.profiles.get(name)

    @property
    def profile_names(self) -> tuple[str, ...]:
        return tuple(sorted(self.profiles))

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, root: Path) -> Config:
        """Create Config from a parsed TOML table.

        Raises:
            ValueError: If a key has the wrong type.
        """
        for key in ("version", "path", "install_dir", "cacertfile"):
            if key in data and get_str(data, key) is None:
                raise ValueError(f"'{key}' must be a non-empty string")

        profiles_raw = data.get("profiles")
        profiles: dict[str, Profile]
        if profiles_raw is None:
            profiles = _default_profiles()
        else:
            table = as_str_dict(profiles_raw)
            if table is None:
                raise ValueError("'profiles' must be a table")
            profiles = {}
            for name, value in table.items():
                profile_table = as_str_dict(value)
                if profile_table is None:
                    raise ValueError(f"profile '{name}' must be a table")
                profiles[name] = _parse_profile(name, profile_table, root)

        path = get_str(data, "path")
        cacertfile = get_str(data, "cacertfile")

        return cls(
            root=root,
            version=get_str(data, "version") or DEFAULT_VERSION,
            path=_resolve(root, path) if path else None,
            install_dir=get_str(data, "install_dir") or DEFAULT_INSTALL_DIR,
            cacertfile=_resolve(root, cacertfile) if cacertfile else None,
            profiles=profiles,
        )


def _resolve(root: Path, value: str) -> Path:
    p = Path(value).expanduser()
    return p if p.is_absolute() else root / p


def _parse_profile(name: str, table: StrDict, root: Path) -> Profile:
    args: list[str] = []
    if "args" in table:
        parsed_args = get_str_list(table, "args")
        if parsed_args is None:
            raise ValueError(f"profiles.{name}.args must be a list of strings")
        args = parsed_args

    env: dict[str, str] = {}
    if "env" in table:
        parsed_env = get_str_map(table, "env")
        if parsed_env is None:
            raise ValueError(f"profiles.{name}.env must be a table of strings")
        env = parsed_env

    cd: Path | None = None
    if "cd" in table:
        cd_value = get_str(table, "cd")
        if cd_value is None:
            raise ValueError(f"profiles.{name}.cd must be a non-empty string")
        cd = _resolve(root, cd_value)

    return Profile(args=tuple(args), cd=cd, env=env)


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and syntax errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def _tool_table(data: StrDict) -> StrDict | None:
    tool = get_table(data, "tool")
    if tool is None:
        return None
    return get_table(tool, "uvm")


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load configuration from ``uvm.toml`` or a ``pyproject.toml``.

    For ``pyproject.toml`` only the ``[tool.uvm]`` table is read; a file
    without it yields the default configuration.
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    data = result.value
    if path.name == PYPROJECT_FILENAME:
        data = _tool_table(data) or {}

    root = path.resolve().parent
    try:
        return Ok(Config.from_dict(data, root=root))
    except ValueError as e:
        return Err(ConfigError(f"Invalid config: {e}", path=path))


def find_config(start: Path) -> Path | None:
    """Find the nearest config file, walking up from ``start``.

    ``uvm.toml`` wins over ``pyproject.toml`` in the same directory, and a
    ``pyproject.toml`` only counts when it has a ``[tool.uvm]`` table.
    """
    start = start.resolve()
    for parent in (start, *start.parents):
        candidate = parent / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = parent / PYPROJECT_FILENAME
        if pyproject.is_file():
            parsed = _parse_toml(pyproject)
            if isinstance(parsed, Ok) and _tool_table(parsed.value) is not None:
                return pyproject
    return None


def load_project_config(
    explicit: Path | None = None,
    *,
    cwd: Path | None = None,
) -> Result[Config, ConfigError]:
    """Load the config for the current project.

    Args:
        explicit: Config file given on the command line (must exist)
        cwd: Directory to start discovery from (default: current directory)

    Returns:
        Ok(Config), defaulting to ``Config(root=cwd)`` when no file is found
    """
    if explicit is not None:
        return load_config(explicit)

    base = cwd or Path.cwd()
    found = find_config(base)
    if found is None:
        return Ok(Config(root=base.resolve()))
    return load_config(found)
