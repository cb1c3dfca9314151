"""Read ``sessionview.yml`` into validated config models."""

import logging
from pathlib import Path
from typing import Iterator, Optional, Type, TypeVar

import yaml
from pydantic import BaseModel

from sessionview.config.schema import AppConfig
from sessionview.utils import expand_env_vars

logger = logging.getLogger(__name__)

ConfigT = TypeVar("ConfigT", bound=BaseModel)

DEFAULT_CONFIG_PATH = "~/.sessionview/sessionview.yml"


def _extra_keys(model: BaseModel, section: str) -> Iterator[tuple[str, list[str]]]:
    """Yield ``(section, keys)`` for every section carrying keys the schema does not define."""
    if model.model_extra:
        yield section, sorted(model.model_extra)
    for name in type(model).model_fields:
        child = getattr(model, name)
        if isinstance(child, BaseModel):
            yield from _extra_keys(child, f"{section}.{name}")


def _warn_unknown_keys(model: BaseModel, config_path: Path) -> None:
    for section, keys in _extra_keys(model, "root"):
        logger.warning("Unknown keys in %s at %s: %s", section, config_path, keys)


def load_config(path: Path, model_class: Type[ConfigT]) -> ConfigT:
    """Validate a YAML config file against ``model_class``.

    A missing, unreadable or non-mapping file yields the model defaults.
    Schema violations propagate as ``pydantic.ValidationError``.
    """
    if not path.exists():
        return model_class()

    try:
        with open(path, encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return model_class()

    if document is None:
        document = {}
    if not isinstance(document, dict):
        logger.warning("Config file %s does not contain a mapping; using defaults", path)
        return model_class()

    model = model_class.model_validate(expand_env_vars(document))
    _warn_unknown_keys(model, path)
    return model


def load_app_config(path: Optional[Path] = None) -> AppConfig:
    """Load the application config, defaulting to ``~/.sessionview/sessionview.yml``."""
    return load_config(path if path is not None else Path(DEFAULT_CONFIG_PATH).expanduser(), AppConfig)
