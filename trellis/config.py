"""
Config system - Layered typed configuration with validation.

Merge precedence (later overrides earlier):
defaults < YAML config files < .env file < environment variables
< explicit overrides
"""

from typing import Any, Dict, List, Optional, Type, get_args, get_origin
from dataclasses import dataclass, field, fields, MISSING
from glob import glob
from pathlib import Path
import json
import os
import types

import yaml
from dotenv import dotenv_values


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass
class TrellisConfig:
    """
    Framework settings.

    Attributes:
        template_dirs: Directories searched for view templates
        template_suffix: Suffix appended to template names without one
        default_layout: Layout wrapping rendered views (None disables layouts)
        default_content_type: Content type of rendered views
        autoescape: HTML-escape template output
        validate_on_register: Resolve every action when a controller is registered
        max_body_size: Maximum request body size in bytes
    """
    template_dirs: List[str] = field(default_factory=lambda: ["templates"])
    template_suffix: str = ".html"
    default_layout: Optional[str] = "/layouts/default_layout"
    default_content_type: str = "text/html; charset=utf-8"
    autoescape: bool = True
    validate_on_register: bool = True
    max_body_size: int = 10_485_760


_LITERALS = {
    "true": True,
    "yes": True,
    "false": False,
    "no": False,
    "none": None,
    "null": None,
}


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources.

    Environment variables use the prefix and ``__`` for nesting:
    ``TRELLIS_DEFAULT_LAYOUT=/layouts/admin``.
    """

    def __init__(self, env_prefix: str = "TRELLIS_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        paths: Optional[List[str]] = None,
        env_prefix: str = "TRELLIS_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        use_environ: bool = True,
    ) -> "ConfigLoader":
        """
        Load configuration from every source.

        Args:
            paths: YAML config file paths (glob patterns supported)
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)
            use_environ: Read os.environ

        Returns:
            Configured ConfigLoader instance
        """
        loader = cls(env_prefix=env_prefix)

        for pattern in paths or []:
            loader._load_from_files(pattern)

        if env_file:
            loader._load_env_file(env_file)

        if use_environ:
            loader._load_from_env()

        if overrides:
            loader._merge_dict(loader.config_data, overrides)

        return loader

    def _load_from_files(self, pattern: str):
        """Load YAML config files matching a glob pattern, in name order."""
        for path in sorted(Path(p) for p in glob(pattern)):
            if path.suffix not in (".yaml", ".yml"):
                raise ConfigError(f"Unsupported config file type: {path} (expected .yaml or .yml)")

            with open(path) as f:
                data = yaml.safe_load(f)
            if data is None:
                continue
            if not isinstance(data, dict):
                raise ConfigError(f"Config file {path} must contain a mapping")
            self._merge_dict(self.config_data, data)

    def _load_env_file(self, path: str):
        """Load prefixed keys from a .env file."""
        env_path = Path(path)
        if not env_path.exists():
            return

        for key, value in dotenv_values(env_path).items():
            if value is not None and key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _load_from_env(self):
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _set_nested(self, key: str, value: str):
        """Store TRELLIS_VIEWS__CACHE=yes as {"views": {"cache": True}}."""
        *sections, name = key[len(self.env_prefix):].lower().split("__")

        target = self.config_data
        for section in sections:
            if not isinstance(target.get(section), dict):
                target[section] = {}
            target = target[section]

        target[name] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Coerce an environment string to bool, None, number or JSON where it reads as one."""
        lowered = value.lower()
        if lowered in _LITERALS:
            return _LITERALS[lowered]

        for number in (int, float):
            try:
                return number(value)
            except ValueError:
                continue

        if value[:1] in ("{", "["):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return value

        return value

    def _merge_dict(self, target: dict, source: dict):
        """Deep merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._merge_dict(target[key], value)
            else:
                target[key] = value

    def to_config(self, config_class: Type = TrellisConfig) -> Any:
        """Instantiate a config dataclass from the merged data."""
        kwargs = {}

        for field_info in fields(config_class):
            if field_info.name in self.config_data:
                value = self.config_data[field_info.name]
                if not self._check_type(value, field_info.type):
                    raise ConfigError(
                        f"Config field '{field_info.name}' expected {field_info.type}, "
                        f"got {type(value).__name__}"
                    )
                kwargs[field_info.name] = value
            elif field_info.default is MISSING and field_info.default_factory is MISSING:
                raise ConfigError(f"Required config field '{field_info.name}' not provided")

        return config_class(**kwargs)

    def _check_type(self, value: Any, expected_type: Any) -> bool:
        """Basic type checking."""
        origin = get_origin(expected_type)
        if origin is types.UnionType or str(origin) == 'typing.Union':
            if value is None:
                return type(None) in get_args(expected_type)
            return any(
                self._check_type(value, arg)
                for arg in get_args(expected_type)
                if arg is not type(None)
            )

        if origin:
            return isinstance(value, origin)

        if expected_type is int and isinstance(value, bool):
            return False

        try:
            return isinstance(value, expected_type)
        except TypeError:
            return True


def load_config(
    paths: Optional[List[str]] = None,
    env_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
    use_environ: bool = True,
) -> TrellisConfig:
    """Load TrellisConfig from files, the environment and overrides."""
    loader = ConfigLoader.load(
        paths=paths,
        env_file=env_file,
        overrides=overrides,
        use_environ=use_environ,
    )
    return loader.to_config(TrellisConfig)
