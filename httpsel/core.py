"""httpsel core - config loading, env resolution, transport setup."""

import os
import re
from pathlib import Path

import yaml
from dotenv import dotenv_values

from httpsel.executor import RequestsAdapter

GLOBAL_DIR = Path.home() / ".httpsel"
GLOBAL_CONFIG = GLOBAL_DIR / "config.yaml"

CWD_CONFIG_CANDIDATES = [
    ".httpsel.yaml",
    ".httpsel.yml",
    "httpsel.yaml",
    "httpsel.yml",
]

DEFAULT_TIMEOUT = 30


def resolve_path(
    candidates: list[Path],
    default: Path | None = None,
) -> Path | None:
    """Return the first existing path from candidates, else default."""
    for p in candidates:
        if p.exists():
            return p.resolve()
    return default


def resolve_config_path(config_file: str | None) -> Path | None:
    """Find the config file to use.

    Resolution order:
      1. Explicit -c flag (hard — no fallthrough if missing)
      2. .httpsel.yaml (variants) in CWD
      3. ~/.httpsel/config.yaml
    """
    if config_file:
        return resolve_path([Path(config_file)])
    return resolve_path([Path(c) for c in CWD_CONFIG_CANDIDATES] + [GLOBAL_CONFIG])


def load_config(config_path: str | Path | None) -> dict:
    """Load YAML config file. Returns empty defaults if not found.

    Recognised defaults: timeout, headers, env_file.
    """
    if config_path is None:
        return {"defaults": {}, "_config_dir": None}
    path = Path(config_path)
    if not path.exists():
        return {"defaults": {}, "_config_dir": None}
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    return {
        "defaults": data.get("defaults") or {},
        "_config_dir": path.resolve().parent,
    }


def load_env(env_file: str | None, base_dir: str | Path = ".") -> dict[str, str]:
    """Load .env file and merge with os.environ.

    .env values take precedence over os.environ. A relative env_file is
    looked up under base_dir, normally the directory of the config file.
    """
    env = dict(os.environ)
    if env_file:
        dotenv_path = Path(base_dir) / env_file
        if dotenv_path.exists():
            dotenv_vars = dotenv_values(str(dotenv_path))
            env.update({k: v for k, v in dotenv_vars.items() if v is not None})
    return env


def resolve_value(value: str | None, env: dict[str, str]) -> str | None:
    """Resolve $VAR and ${VAR} references in a config value.

    Unknown variables are left as written.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value

    def _replace(m: re.Match) -> str:
        var_name = m.group(1) or m.group(2)
        return env.get(var_name, os.environ.get(var_name, m.group(0)))

    return re.sub(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)", _replace, value)


def resolve_timeout(*sources, default: int = DEFAULT_TIMEOUT) -> int:
    """Return the first truthy timeout from sources, or default."""
    for t in sources:
        if t:
            return int(t)
    return default


def build_adapter(
    config: dict,
    env: dict[str, str],
    timeout: int | None = None,
) -> RequestsAdapter:
    """Build the transport from config defaults; CLI timeout wins."""
    defaults = config.get("defaults", {})
    headers = {
        str(k): resolve_value(str(v), env) or ""
        for k, v in (defaults.get("headers") or {}).items()
    }
    return RequestsAdapter(
        timeout=resolve_timeout(timeout, defaults.get("timeout")),
        default_headers=headers,
    )
