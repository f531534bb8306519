"""File output protocols, registry and built-in outputs.

This module exposes:
- TransactionalFileOutput / FileOutputPlugin: the host-facing protocols
- Registry functions: register_output, get_output_plugin, list_output_types
- Built-in outputs: S3FileOutputPlugin (registered as 's3')
"""

from s3fileoutput.outputs.base import (
    ConfigDiff,
    Control,
    FileOutputPlugin,
    TaskReport,
    TaskSource,
    TransactionalFileOutput,
)

# Registry must be imported first (output modules use decorators on import)
from s3fileoutput.outputs.registry import (
    clear_registry,
    get_output_plugin,
    list_output_types,
    register_output,
)

from s3fileoutput.outputs.s3.plugin import S3FileOutputPlugin, create_s3_output_plugin


def reregister_builtins() -> None:
    """Re-register built-in outputs after the registry is cleared.

    Intended for tests that call clear_registry() but need the built-in
    outputs available afterwards.
    """
    if "s3" not in list_output_types():
        register_output("s3", create_s3_output_plugin)


__all__ = [
    "ConfigDiff",
    "Control",
    "FileOutputPlugin",
    "TaskReport",
    "TaskSource",
    "TransactionalFileOutput",
    "clear_registry",
    "get_output_plugin",
    "list_output_types",
    "register_output",
    "reregister_builtins",
    "S3FileOutputPlugin",
    "create_s3_output_plugin",
]
