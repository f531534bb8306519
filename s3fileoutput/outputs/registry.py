"""Output plugin registry.

Plugins register a factory under their ``type`` name so a job's ``out.type``
can be resolved to a plugin instance.
"""

from typing import Callable, overload

from s3fileoutput.core.exceptions import ConfigurationError
from s3fileoutput.outputs.base import FileOutputPlugin

OutputPluginFactory = Callable[[], FileOutputPlugin]

_output_registry: dict[str, OutputPluginFactory] = {}


@overload
def register_output(output_type: str) -> Callable[[OutputPluginFactory], OutputPluginFactory]: ...


@overload
def register_output(output_type: str, factory: OutputPluginFactory) -> None: ...


def register_output(
    output_type: str,
    factory: OutputPluginFactory | None = None,
) -> Callable[[OutputPluginFactory], OutputPluginFactory] | None:
    """Register an output plugin factory.

    Can be used as a decorator or called directly:

        # As decorator
        @register_output("s3")
        def create_s3_output_plugin():
            return S3FileOutputPlugin()

        # Direct call
        register_output("s3", create_s3_output_plugin)

    Args:
        output_type: Unique identifier for the output (e.g., 's3').
        factory: Factory function (optional if used as decorator).

    Raises:
        ConfigurationError: If an output with the same type is already registered.
    """

    def _register(f: OutputPluginFactory) -> OutputPluginFactory:
        if output_type in _output_registry:
            raise ConfigurationError(
                f"Output '{output_type}' is already registered",
                context={"output_type": output_type},
            )
        _output_registry[output_type] = f
        return f

    if factory is not None:
        _register(factory)
        return None

    return _register


def get_output_plugin(output_type: str) -> FileOutputPlugin:
    """Create a plugin instance using the registered factory.

    Raises:
        ConfigurationError: If the output type is not registered.
    """
    factory = _output_registry.get(output_type)
    if factory is None:
        available = ", ".join(sorted(_output_registry.keys())) or "(none)"
        raise ConfigurationError(
            f"Unknown output type: '{output_type}'",
            context={"output_type": output_type, "available_types": available},
        )
    return factory()


def list_output_types() -> list[str]:
    """Return a list of all registered output types."""
    return sorted(_output_registry.keys())


def clear_registry() -> None:
    """Clear all registered outputs. Intended for testing only."""
    _output_registry.clear()
