"""Service toolkit: metrics wrappers, protobuf HTTP client, build info and middleware helpers."""

__version__ = "0.1.0"