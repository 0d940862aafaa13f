"""Utility modules for logging, errors, retries and storage client management."""

from storage_deploy.utils.aws_client import AWSClientManager
from storage_deploy.utils.retry import RetryStrategy
from storage_deploy.utils.errors import (
    ErrorCategory,
    ErrorSeverity,
    ErrorContext,
    DeploymentError,
    ConfigurationError,
    InvalidVersionFormatError,
    CredentialError,
    TransientRemoteError,
    ItemFailedError,
    ListingFailedError,
    TooManyPagesError,
    UninitializedError,
    ErrorHandler,
    error_handler
)
from storage_deploy.utils.logging import get_logger, setup_logging

__all__ = [
    # Storage client
    'AWSClientManager',

    # Retry
    'RetryStrategy',

    # Errors
    'ErrorCategory',
    'ErrorSeverity',
    'ErrorContext',
    'DeploymentError',
    'ConfigurationError',
    'InvalidVersionFormatError',
    'CredentialError',
    'TransientRemoteError',
    'ItemFailedError',
    'ListingFailedError',
    'TooManyPagesError',
    'UninitializedError',
    'ErrorHandler',
    'error_handler',

    # Logging
    'get_logger',
    'setup_logging',
]
