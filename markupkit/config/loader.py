"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import MarkupConfig

# Only these variables may be referenced as ${VAR} in markupkit.yaml
_ALLOWED_ENV_VARS: frozenset[str] = frozenset({
    "HOME",
    "MARKUPKIT_TIMEOUT",
    "PANDOC_DATA_DIR",
    "ASCIIDOCTOR_BIN",
})


def load_config(cli_path: str | None = None) -> MarkupConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./markupkit.yaml"),
        Path.home() / ".markupkit" / "config.yaml",
    ]

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                raw = _expand_env_vars(raw)
                return MarkupConfig.model_validate(raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ValueError(f"Invalid config in {path}: {e}") from e

    return MarkupConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings.

    Raises ValueError for variables outside the allow-list or not set.
    """
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", _lookup_env_var, obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


def _lookup_env_var(match: re.Match[str]) -> str:
    name = match.group(1)
    if name not in _ALLOWED_ENV_VARS:
        raise ValueError(f"Environment variable {name!r} is not allowed in config")
    value = os.environ.get(name)
    if value is None:
        raise ValueError(f"Environment variable {name!r} is not set")
    return value


# Default YAML template for `markupkit config init`
DEFAULT_CONFIG_TEMPLATE = """\
# markupkit.yaml

# Engine
engine:
  default_timeout: 30          # seconds before an external command is killed

# Registry
registry:
  on_duplicate: "reject"       # reject | override
  # disabled: [pod, rdoc]      # languages to leave unregistered

# Extra renderers, registered after the built-ins
# renderers:
#   - name: "commonmark"
#     extensions: [".cm"]
#     strategy: "command"
#     command:
#       argv: "cmark --to html"
#       timeout: 10
#   - name: "markdown-it"
#     extensions: [".mdit"]
#     strategy: "library"
#     library:
#       module: "markdown_it"
#       entry_point: "MarkdownIt"
#       method: "render"
#       package: "markdown-it-py"

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
