"""S3 file output module."""

from s3fileoutput.outputs.s3.client import create_s3_client
from s3fileoutput.outputs.s3.config import HttpProxy, S3OutputConfig
from s3fileoutput.outputs.s3.file_output import S3FileOutput
from s3fileoutput.outputs.s3.plugin import S3FileOutputPlugin, create_s3_output_plugin
from s3fileoutput.outputs.s3.sequence import (
    build_key,
    format_sequence,
    validate_sequence_format,
)
from s3fileoutput.outputs.s3.uploader import ObjectUploader

__all__ = [
    "HttpProxy",
    "ObjectUploader",
    "S3FileOutput",
    "S3FileOutputPlugin",
    "S3OutputConfig",
    "build_key",
    "create_s3_client",
    "create_s3_output_plugin",
    "format_sequence",
    "validate_sequence_format",
]
