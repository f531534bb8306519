"""Tests for the S3 output plugin and the output registry."""

from unittest.mock import MagicMock

import pytest

from s3fileoutput.core.exceptions import ConfigurationError
from s3fileoutput.outputs import (
    FileOutputPlugin,
    S3FileOutputPlugin,
    TransactionalFileOutput,
    clear_registry,
    create_s3_output_plugin,
    get_output_plugin,
    list_output_types,
    register_output,
    reregister_builtins,
)
from s3fileoutput.outputs.s3.config import S3OutputConfig
from s3fileoutput.outputs.s3.file_output import S3FileOutput


@pytest.fixture
def plugin() -> S3FileOutputPlugin:
    return S3FileOutputPlugin()


class TestTransaction:
    """Tests for job-level transaction handling."""

    def test_control_receives_task_source(self, plugin, out_config):
        control = MagicMock(return_value=[{}, {}])

        config_diff = plugin.transaction(out_config, 2, control)

        assert config_diff == {}
        control.assert_called_once()
        task_source = control.call_args.args[0]
        assert task_source["bucket"] == "test-bucket"
        assert task_source["sequence_format"] == ".%03d.%02d"
        assert task_source["credentials"]["auth_method"] == "basic"

    def test_invalid_sequence_format_aborts_before_tasks(self, plugin, out_config):
        out_config["sequence_format"] = ".%03d.%02d.%d"
        control = MagicMock()

        with pytest.raises(ConfigurationError) as exc_info:
            plugin.transaction(out_config, 1, control)

        assert "Invalid sequence_format" in str(exc_info.value)
        control.assert_not_called()

    def test_missing_bucket(self, plugin, out_config):
        del out_config["bucket"]
        control = MagicMock()

        with pytest.raises(ConfigurationError) as exc_info:
            plugin.transaction(out_config, 1, control)

        assert "bucket" in str(exc_info.value)
        control.assert_not_called()

    def test_control_errors_propagate(self, plugin, out_config):
        control = MagicMock(side_effect=RuntimeError("task 0 failed"))

        with pytest.raises(RuntimeError, match="task 0 failed"):
            plugin.transaction(out_config, 1, control)

    def test_resume_reuses_task_source(self, plugin):
        control = MagicMock(return_value=[{}])
        task_source = {"bucket": "b", "path_prefix": "p", "file_ext": ".txt"}

        assert plugin.resume(task_source, 1, control) == {}
        control.assert_called_once_with(task_source)

    def test_cleanup_is_a_no_op(self, plugin, out_config):
        assert plugin.cleanup(out_config, 3, [{}, {}, {}]) is None


class TestOpen:
    """Tests for per-task output creation."""

    def test_open_builds_output_for_task(self, plugin, out_config, s3_client):
        task_source = plugin.load_config(out_config).to_task_source()

        output = plugin.open(task_source, 4)

        assert isinstance(output, S3FileOutput)
        assert output.task_index == 4
        assert output.current_key == "logs/out.004.00.csv"
        output.close()

    def test_open_uploads_to_bucket(self, plugin, out_config, s3_client, list_keys):
        task_source = plugin.load_config(out_config).to_task_source()
        output = plugin.open(task_source, 0)

        output.start_new_unit()
        output.write(b"hello")
        output.finish()
        output.close()

        assert list_keys() == ["logs/out.000.00.csv"]

    def test_load_config_returns_model(self, plugin, out_config):
        task = plugin.load_config(out_config)
        assert isinstance(task, S3OutputConfig)
        assert task.file_ext == ".csv"


class TestProtocols:
    """Tests for structural conformance to the host protocols."""

    def test_plugin_conforms(self, plugin):
        assert isinstance(plugin, FileOutputPlugin)

    def test_output_conforms(self, out_config):
        output = S3FileOutput(S3OutputConfig(**out_config), 0, client=MagicMock())
        assert isinstance(output, TransactionalFileOutput)


class TestOutputRegistry:
    """Tests for output registration and lookup."""

    @pytest.fixture(autouse=True)
    def restore_registry(self):
        yield
        clear_registry()
        reregister_builtins()

    def test_s3_is_registered(self):
        assert "s3" in list_output_types()
        assert isinstance(get_output_plugin("s3"), S3FileOutputPlugin)

    def test_each_lookup_creates_instance(self):
        assert get_output_plugin("s3") is not get_output_plugin("s3")

    def test_unknown_type(self):
        with pytest.raises(ConfigurationError) as exc_info:
            get_output_plugin("gcs")

        assert "Unknown output type" in str(exc_info.value)
        assert exc_info.value.context["available_types"] == "s3"

    def test_duplicate_registration(self):
        with pytest.raises(ConfigurationError, match="already registered"):
            register_output("s3", create_s3_output_plugin)

    def test_decorator_registration(self):
        @register_output("memory")
        def create_memory_plugin():
            return MagicMock()

        assert create_memory_plugin is not None
        assert list_output_types() == ["memory", "s3"]

    def test_clear_and_reregister(self):
        clear_registry()
        assert list_output_types() == []

        with pytest.raises(ConfigurationError) as exc_info:
            get_output_plugin("s3")
        assert exc_info.value.context["available_types"] == "(none)"

        reregister_builtins()
        assert list_output_types() == ["s3"]
