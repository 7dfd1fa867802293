import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

import yaml

DEFAULT_CONFIG: dict = {
    "identity": "robotally",  # login the reports are posted under; its own comments are never tallied
    "protected_branch": "master",  # pull requests against this branch get a warning banner
    "disabled_reactions": [":+1:", ":-1:"],  # reaction codes never listed in the report
    "secrets": {},  # name -> webhook secret; empty = accept unsigned notifications
}


def load_config(config_path: str = ".robotally.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .robotally.yml in the current directory
      3. CLI argument overrides
    """
    config = {
        **DEFAULT_CONFIG,
        "disabled_reactions": list(DEFAULT_CONFIG["disabled_reactions"]),
        "secrets": dict(DEFAULT_CONFIG["secrets"]),
    }

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Resolve credentials from environment variables
    config["github_token"] = os.environ.get("GITHUB_TOKEN")
    secret = os.environ.get("ROBOTALLY_SECRET")
    if secret:
        config["secrets"] = {**(config.get("secrets") or {}), "default": secret}

    return config


@dataclass(frozen=True)
class Settings:
    """Immutable engine configuration threaded into every component."""

    identity: str = DEFAULT_CONFIG["identity"]
    protected_branch: str = DEFAULT_CONFIG["protected_branch"]
    disabled_reactions: frozenset[str] = frozenset(DEFAULT_CONFIG["disabled_reactions"])
    secrets: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    github_token: Optional[str] = None

    @classmethod
    def from_config(cls, config: dict) -> "Settings":
        return cls(
            identity=config.get("identity") or DEFAULT_CONFIG["identity"],
            protected_branch=config.get("protected_branch") or DEFAULT_CONFIG["protected_branch"],
            disabled_reactions=frozenset(config.get("disabled_reactions", DEFAULT_CONFIG["disabled_reactions"]) or []),
            secrets=MappingProxyType({str(k): str(v) for k, v in (config.get("secrets") or {}).items()}),
            github_token=config.get("github_token"),
        )
