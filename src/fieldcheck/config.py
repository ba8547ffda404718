"""Schema configuration loaded from YAML/JSON files or dictionaries.

Layout::

    settings:
      strict_rules: false
    schemas:
      - name: signup
        fields:
          - name: email
            rules: "required|email"

Settings can be overridden from the environment with ``FIELDCHECK_``
prefixed variables, e.g. ``FIELDCHECK_STRICT_RULES=true``.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml  # type: ignore[import-untyped]

from .exceptions import ConfigurationError, NotFoundError, SchemaNotFoundError
from .factory import SchemaFactory, schema_factory
from .schema import Schema

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: Dict[str, Any] = {
    "strict_rules": False,
}


class SchemaConfig:
    """Named schema definitions plus global settings.

    Schemas are built on first request and cached. A schema's own
    ``strict_rules`` entry wins over the global setting.
    """

    ENV_PREFIX = "FIELDCHECK_"

    def __init__(
        self,
        *sources: Union[str, Path, dict],
        use_env: bool = True,
        factory: SchemaFactory | None = None,
    ) -> None:
        """Initialize from one or more sources.

        Args:
            *sources: File paths or dictionaries, loaded in order
            use_env: Apply ``FIELDCHECK_*`` environment overrides
            factory: Factory used to build schemas
        """
        self._settings: Dict[str, Any] = dict(DEFAULT_SETTINGS)
        self._schema_configs: Dict[str, Dict[str, Any]] = {}
        self._schemas: Dict[str, Schema] = {}
        self._factory = factory or schema_factory
        self._use_env = use_env

        for source in sources:
            self._load_source(source)

        if use_env:
            self._apply_environment_overrides()

    @classmethod
    def from_file(cls, path: Union[str, Path], **kwargs: Any) -> SchemaConfig:
        return cls(path, **kwargs)

    @classmethod
    def from_dict(cls, data: dict, **kwargs: Any) -> SchemaConfig:
        return cls(data, **kwargs)

    def load(self, source: Union[str, Path, dict]) -> None:
        """Load configuration from a source.

        Environment overrides are re-applied afterwards, so they still win
        over settings from the new source, and cached schemas are rebuilt on
        next request.

        Args:
            source: File path or dictionary
        """
        self._load_source(source)
        if self._use_env:
            self._apply_environment_overrides()
        self._schemas.clear()

    def _load_source(self, source: Union[str, Path, dict]) -> None:
        if isinstance(source, dict):
            self._load_dict(source)
        elif isinstance(source, (str, Path)):
            self._load_file(source)
        else:
            raise ConfigurationError(f"Invalid source type: {type(source)}")

    def _load_file(self, path: Union[str, Path]) -> None:
        path = Path(path).resolve()

        if not path.exists():
            raise NotFoundError(f"Configuration file not found: {path}", context={"path": str(path)})

        suffix = path.suffix.lower()
        with open(path) as f:
            if suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigurationError(f"Unsupported file format: {suffix}")

        if data:
            self._load_dict(data)

    def _load_dict(self, data: dict) -> None:
        settings = data.get("settings") or {}
        if not isinstance(settings, dict):
            raise ConfigurationError("'settings' must be a mapping")
        self._settings.update(settings)

        schemas = data.get("schemas") or []
        if isinstance(schemas, dict):
            schemas = [schemas]

        for schema_config in schemas:
            name = schema_config.get("name") if isinstance(schema_config, dict) else None
            if not name:
                raise ConfigurationError("Schema configuration missing 'name'")
            if name in self._schema_configs:
                logger.debug("Replacing schema configuration '%s'", name)
            self._schema_configs[name] = copy.deepcopy(schema_config)
            self._schemas.pop(name, None)

    def _apply_environment_overrides(self) -> None:
        for env_var, raw in os.environ.items():
            if not env_var.startswith(self.ENV_PREFIX):
                continue
            setting = env_var[len(self.ENV_PREFIX):].lower()
            if not setting:
                continue
            self._settings[setting] = self._parse_value(raw)
            logger.debug("Setting '%s' overridden from %s", setting, env_var)
        self._schemas.clear()

    def _parse_value(self, value: str) -> Any:
        """Parse an environment variable value to appropriate type.

        Args:
            value: String value from environment

        Returns:
            Parsed value (bool, int, float, or original string)
        """
        if value.lower() in ["true", "yes", "1"]:
            return True
        elif value.lower() in ["false", "no", "0"]:
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def get_setting(self, key: str, default: Any = None) -> Any:
        return self._settings.get(key, default)

    def schema_names(self) -> List[str]:
        """Names of the configured schemas, in load order."""
        return list(self._schema_configs)

    def get_schema(self, name: str) -> Schema:
        """Build (or return the cached) schema for a name.

        Args:
            name: Configured schema name

        Returns:
            Schema instance

        Raises:
            SchemaNotFoundError: If no schema with that name is configured
        """
        if name in self._schemas:
            return self._schemas[name]

        schema_config = self._schema_configs.get(name)
        if schema_config is None:
            raise SchemaNotFoundError(name, self.schema_names())

        build_config = {"strict_rules": bool(self.get_setting("strict_rules", False))}
        build_config.update(schema_config)
        schema = self._factory.create(**build_config)
        self._schemas[name] = schema
        return schema

    def to_dict(self) -> Dict[str, Any]:
        return {
            "settings": dict(self._settings),
            "schemas": [copy.deepcopy(c) for c in self._schema_configs.values()],
        }
