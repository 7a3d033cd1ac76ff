"""User settings stored as TOML in the copypasta config directory.

Only the keys in ``SETTINGS`` are recognised. Values read from disk or typed
on the command line go through ``config_value_parse`` so a hand-edited file
cannot push, say, a duplicate threshold of ``"high"`` into the scorer.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import tempfile
from typing import Any, Callable

import tomli
import tomli_w

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = "~/.config/copypasta"
CONFIG_FILE_NAME = "config.toml"
OUTPUT_FORMATS = ("table", "json", "csv")


def config_dir_get() -> str:
    """Return the config directory (``COPYPASTA_CONFIG_DIR`` wins)."""
    return os.path.expanduser(os.environ.get("COPYPASTA_CONFIG_DIR", DEFAULT_CONFIG_DIR))


def config_path_get() -> str:
    """Return the path of ``config.toml``."""
    return os.path.join(config_dir_get(), CONFIG_FILE_NAME)


def _unit_interval(raw: Any) -> float:
    if isinstance(raw, bool):
        raise ValueError("expected a number between 0 and 1")
    value = float(raw)
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{value} is outside 0..1")
    return value


def _label(raw: Any) -> str:
    value = str(raw).strip()
    if not value:
        raise ValueError("must not be blank")
    return value


def _output_format(raw: Any) -> str:
    value = str(raw).strip().lower()
    if value not in OUTPUT_FORMATS:
        raise ValueError(f"expected one of {', '.join(OUTPUT_FORMATS)}")
    return value


# key -> parser turning a TOML or command-line value into the stored value
SETTINGS: dict[str, Callable[[Any], Any]] = {
    "duplicate_threshold": _unit_interval,
    "title_weight": _unit_interval,
    "code_weight": _unit_interval,
    "default_language": _label,
    "format": _output_format,
}


def config_value_parse(key: str, raw: Any) -> Any:
    """Return *raw* converted for *key*.

    Raises ``KeyError`` for an unknown key and ``ValueError`` for a value the
    key does not accept.
    """
    parser = SETTINGS[key]
    try:
        return parser(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid value {raw!r} for '{key}': {e}") from e


@dataclasses.dataclass
class CopyPastaConfig:
    """Effective settings: the file's values laid over the defaults.

    Supports ``in``, ``[]`` and ``get`` so callers can treat it like the
    TOML table it came from.
    """

    duplicate_threshold: float = 0.7
    title_weight: float = 0.4
    code_weight: float = 0.6
    default_language: str = "plaintext"
    format: str = "table"

    def get(self, key: str, default: object = None) -> object:
        return getattr(self, key) if key in SETTINGS else default

    def items(self) -> list[tuple[str, object]]:
        return list(self.to_dict().items())

    def update(self, values: dict) -> None:
        """Apply the recognised keys of *values*; anything else is ignored."""
        for key, value in values.items():
            if key in SETTINGS:
                setattr(self, key, value)

    def clear(self) -> None:
        self.update(DEFAULTS)

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)

    def __contains__(self, key: str) -> bool:
        return key in SETTINGS

    def __getitem__(self, key: str) -> object:
        if key not in SETTINGS:
            raise KeyError(key)
        return getattr(self, key)

    def __setitem__(self, key: str, value: object) -> None:
        self.update({key: value})


DEFAULTS = CopyPastaConfig().to_dict()


def _config_file_read() -> dict:
    """Return the valid settings stored in the config file.

    A file that is not TOML is logged and treated as empty. Unknown keys and
    unusable values are dropped with a warning.
    """
    cfg_path = config_path_get()
    try:
        with open(cfg_path, "rb") as f:
            raw = tomli.load(f)
    except FileNotFoundError:
        return {}
    except tomli.TOMLDecodeError as e:
        logger.error("Error decoding config file at %s: %s", cfg_path, e)
        return {}

    settings = {}
    for key, value in raw.items():
        if key not in SETTINGS:
            logger.warning("Ignoring unknown setting '%s' in %s", key, cfg_path)
            continue
        try:
            settings[key] = config_value_parse(key, value)
        except ValueError as e:
            logger.warning("Ignoring setting in %s: %s", cfg_path, e)
    return settings


def save_config(settings: dict | CopyPastaConfig) -> None:
    """Replace the config file with *settings*."""
    cfg_dir = config_dir_get()
    data = settings.to_dict() if isinstance(settings, CopyPastaConfig) else dict(settings)
    os.makedirs(cfg_dir, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=cfg_dir, suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as tmp:
            tomli_w.dump(data, tmp)
        os.replace(tmp_path, config_path_get())
    except Exception:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def update_config(key: str, value: Any) -> dict:
    """Store *value* under *key* and return the effective settings.

    Raises ``KeyError`` / ``ValueError`` as ``config_value_parse`` does,
    before anything is written.
    """
    parsed = config_value_parse(key, value)
    settings = _config_file_read()
    settings[key] = parsed
    save_config(settings)
    return {**DEFAULTS, **settings}


def remove_config_key(key: str) -> dict:
    """Drop *key* from the file, restoring its default; return the effective settings."""
    settings = _config_file_read()
    if settings.pop(key, None) is not None:
        save_config(settings)
    return {**DEFAULTS, **settings}


def load_config() -> CopyPastaConfig:
    """Return the effective settings for this user."""
    config = CopyPastaConfig()
    config.update(_config_file_read())
    return config
