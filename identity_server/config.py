"""Configuration loading and validation."""

import os
import platform
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from oauth_providers import PROVIDERS


class ConfigError(Exception):
    """Configuration error with helpful message."""

    def __init__(self, field: str, message: str, hint: Optional[str] = None):
        self.field = field
        self.hint = hint
        full_msg = f"Config error in '{field}': {message}"
        if hint:
            full_msg += f"\n  Hint: {hint}"
        super().__init__(full_msg)


def get_config_dir() -> Path:
    """Get platform-appropriate config directory."""
    system = platform.system()

    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "IdentityServer"
    elif system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "IdentityServer"
    else:
        # Linux/Unix - use XDG
        xdg_config = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        return Path(xdg_config) / "identity-server"


def get_default_config_path() -> Path:
    """Get default config file path."""
    return get_config_dir() / "providers.yaml"


def validate_config(config: Dict[str, Any]) -> List[ConfigError]:
    """Validate configuration and return list of errors.

    Returns:
        List of ConfigError objects (empty if valid)
    """
    errors = []

    providers = config.get("providers", {})
    if providers is None:
        providers = {}
    if not isinstance(providers, dict):
        return [ConfigError(
            "providers",
            "Must be a mapping of provider name to settings",
            "providers:\n  orcid:\n    client_id: ...",
        )]

    for name, settings in providers.items():
        field = f"providers.{name}"

        if name not in PROVIDERS:
            errors.append(ConfigError(
                field,
                "Unknown provider",
                f"Available providers: {', '.join(sorted(PROVIDERS))}",
            ))
            continue

        if not isinstance(settings, dict):
            errors.append(ConfigError(field, "Provider settings must be a mapping"))
            continue

        if not settings.get("client_id"):
            errors.append(ConfigError(
                f"{field}.client_id",
                "Missing required field",
                f"Add 'client_id' for {name} (the OAuth2 client identifier)",
            ))

        scopes = settings.get("scopes")
        if scopes is not None and not isinstance(scopes, list):
            errors.append(ConfigError(
                f"{field}.scopes",
                "Must be a list",
                "scopes:\n  - /authenticate",
            ))

        for key in ("auth_url", "token_url", "user_info_url", "redirect_url", "profile_url_template"):
            url = settings.get(key)
            if url and not (str(url).startswith("https://") or str(url).startswith("http://")):
                errors.append(ConfigError(
                    f"{field}.{key}",
                    "Must start with http:// or https://",
                ))

        template = settings.get("profile_url_template")
        if template and "{orcid_id}" not in str(template):
            errors.append(ConfigError(
                f"{field}.profile_url_template",
                "Missing {orcid_id} placeholder",
                "Example: https://pub.sandbox.orcid.org/v3.0/{orcid_id}/person",
            ))
        elif template:
            try:
                str(template).format(orcid_id="0000-0000-0000-0000")
            except (KeyError, IndexError, ValueError):
                errors.append(ConfigError(
                    f"{field}.profile_url_template",
                    "Only the {orcid_id} placeholder is allowed",
                    "Escape literal braces as {{ and }}",
                ))

    return errors


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand ${VAR} patterns in strings."""
    if isinstance(obj, str):
        if obj.startswith("${") and obj.endswith("}"):
            var_name = obj[2:-1]
            return os.environ.get(var_name, obj)
        return obj
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    return obj


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML file.

    A missing file at the default location yields an empty provider map.

    Args:
        config_path: Path to config file, or None for default

    Returns:
        Validated configuration dict

    Raises:
        FileNotFoundError: If config file not found (non-default path)
        ConfigError: If validation fails
    """
    if config_path:
        path = Path(config_path)
    else:
        path = get_default_config_path()

    if not path.exists():
        if config_path:
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return {"providers": {}}

    with open(path) as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ConfigError("<root>", "Config file must contain a mapping")

    config = _expand_env_vars(config)

    errors = validate_config(config)
    if errors:
        # Raise first error
        raise errors[0]

    if config.get("providers") is None:
        config["providers"] = {}

    return config
