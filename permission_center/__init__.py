"""Permission Center: review and override the permissions of sandboxed applications."""

__version__ = "0.3.0"
