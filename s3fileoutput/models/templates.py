"""Template rendering for job values with Jinja2-style syntax."""

import os
import re
from typing import Any, Dict

from s3fileoutput.core.exceptions import ConfigurationError

_TEMPLATE = re.compile(r"\{\{\s*([^}]+)\s*\}\}")
_FUNCTION_CALL = re.compile(r"(\w+)\(['\"]([^'\"]+)['\"]\)")


def render_templates(
    job_dict: Dict[str, Any], cli_vars: Dict[str, str] | None = None
) -> Dict[str, Any]:
    """
    Render Jinja2-style templates in a job dictionary.

    Supports:
    - {{ env_var('VAR_NAME') }} - environment variable lookup
    - {{ var('VAR_NAME') }} - CLI variable lookup
    - {{ job.name }} - job metadata

    Args:
        job_dict: Job dictionary (may contain template expressions)
        cli_vars: Variables passed via CLI (e.g., --vars key=value)

    Returns:
        Job dictionary with templates rendered
    """
    context = {
        "job": {"name": job_dict.get("name", "")},
        "env_var": _get_env_var,
        "var": lambda key: _get_cli_var(key, cli_vars or {}),
    }
    return _render_value(job_dict, context)


def _get_env_var(key: str) -> str:
    """Get environment variable or raise error if not found."""
    value = os.environ.get(key)
    if value is None:
        raise ConfigurationError(
            f"Environment variable '{key}' not found",
            context={"key": key},
        )
    return value


def _get_cli_var(key: str, cli_vars: Dict[str, str]) -> str:
    """Get CLI variable or raise error if not found."""
    if key not in cli_vars:
        raise ConfigurationError(
            f"CLI variable '{key}' not provided",
            context={"key": key, "available": list(cli_vars.keys())},
        )
    return cli_vars[key]


def _render_value(value: Any, context: Dict[str, Any]) -> Any:
    if isinstance(value, dict):
        return {key: _render_value(item, context) for key, item in value.items()}
    elif isinstance(value, list):
        return [_render_value(item, context) for item in value]
    elif isinstance(value, str):
        return _render_string(value, context)
    else:
        return value


def _render_string(text: str, context: Dict[str, Any]) -> str:
    def replace(match):
        expr = match.group(1).strip()

        func_match = _FUNCTION_CALL.fullmatch(expr)
        if func_match:
            func_name, arg = func_match.groups()
            func = context.get(func_name)
            if not callable(func):
                raise ConfigurationError(
                    f"Unknown function: {func_name}",
                    context={"expression": expr},
                )
            return str(func(arg))

        result: Any = context
        try:
            for part in expr.split("."):
                result = result[part]
        except (KeyError, TypeError) as e:
            raise ConfigurationError(
                f"Template rendering failed: {expr}",
                context={"expression": expr, "error": str(e)},
            ) from e
        return str(result)

    return _TEMPLATE.sub(replace, text)
