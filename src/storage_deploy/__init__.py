"""Versioned static asset deployment and cleanup for S3-compatible storage."""

__version__ = "0.1.0"
