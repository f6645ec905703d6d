"""Configuration management"""

import copy
from pathlib import Path
from typing import Any

import tomli
import tomli_w

from tofuverify.verifier.provenance.hash import MATCH_MODES
from tofuverify.verifier.trust import FAILED_BOOTSTRAP_POLICIES

DEFAULT_CONFIG: dict[str, dict[str, Any]] = {
    "general": {
        "trust_root": "~/.tofuverify/keyrings",
        "log_level": "WARNING",
        "log_file": "",
    },
    "keyserver": {
        # A single keyserver rather than a pool, to narrow local network attacks
        "url": "hkps://sks.openpgp-keyserver.de",
        "ca_cert_file": "~/.tofuverify/keyserver-ca.pem",
    },
    "gpg": {
        "binary": "gpg",
        "timeout": 120,
    },
    "policy": {
        "manifest_match": "exact",
        "on_failed_bootstrap": "pin",
    },
}


def default_config_path() -> Path:
    """Location of the user configuration file"""
    return Path.home() / ".tofuverify" / "config.toml"


class Config:
    """User configuration backed by a TOML file, layered over defaults"""

    def __init__(self, config_path: Path | str | None = None):
        self.config_path = Path(config_path) if config_path else default_config_path()
        self.data: dict[str, dict[str, Any]] = copy.deepcopy(DEFAULT_CONFIG)
        self.load()

    def load(self) -> None:
        """Merge the config file, if any, over the defaults"""
        if not self.config_path.exists():
            return

        with open(self.config_path, "rb") as f:
            user_config = tomli.load(f)

        for section, values in user_config.items():
            if isinstance(values, dict):
                self.data.setdefault(section, {}).update(values)

    def save(self) -> None:
        """Write the current configuration to disk"""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "wb") as f:
            tomli_w.dump(self.data, f)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get configuration value"""
        return self.data.get(section, {}).get(key, default)

    def set(self, section: str, key: str, value: Any) -> None:
        """Set configuration value"""
        self.data.setdefault(section, {})[key] = value

    def _path(self, section: str, key: str) -> Path | None:
        value = self.get(section, key)
        if not value:
            return None
        return Path(value).expanduser()

    @property
    def trust_root(self) -> Path:
        return self._path("general", "trust_root") or Path.home() / ".tofuverify" / "keyrings"

    @property
    def ca_cert_file(self) -> Path | None:
        return self._path("keyserver", "ca_cert_file")

    @property
    def log_file(self) -> Path | None:
        return self._path("general", "log_file")


CHOICES = {
    ("policy", "manifest_match"): MATCH_MODES,
    ("policy", "on_failed_bootstrap"): FAILED_BOOTSTRAP_POLICIES,
}


def parse_value(section: str, key: str, raw: str) -> Any:
    """Validate a command-line setting and convert it to the default's type"""
    if section not in DEFAULT_CONFIG:
        raise ValueError(f"Invalid section: {section}")
    if key not in DEFAULT_CONFIG[section]:
        raise ValueError(f"Invalid key: {section}.{key}")

    default = DEFAULT_CONFIG[section][key]
    if isinstance(default, int):
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"Invalid value for {section}.{key}: expected an integer, got {raw}") from None

    choices = CHOICES.get((section, key))
    if choices and raw not in choices:
        raise ValueError(f"Invalid value for {section}.{key}: expected one of {', '.join(choices)}")
    return raw
