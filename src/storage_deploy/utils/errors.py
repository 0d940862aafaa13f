"""Error handling framework for deployment and cleanup operations."""

from typing import Optional, Dict, Any, List
from enum import Enum
from dataclasses import dataclass
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    PartialCredentialsError,
    ProfileNotFound,
    ReadTimeoutError,
)
from storage_deploy.utils.logging import get_logger

logger = get_logger(__name__)


class ErrorCategory(Enum):
    """Categories of errors that can occur during deploy or cleanup."""
    CONFIGURATION = "configuration"
    VERSION = "version"
    STORAGE = "storage"
    NETWORK = "network"
    CREDENTIAL = "credential"
    PERMISSION = "permission"
    LISTING = "listing"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    CRITICAL = "critical"  # Operation cannot continue
    ERROR = "error"  # Item failed but the batch can continue
    WARNING = "warning"  # Non-fatal issue
    INFO = "info"  # Informational message


@dataclass
class ErrorContext:
    """Context information for an error."""
    object_key: Optional[str] = None
    container: Optional[str] = None
    operation: Optional[str] = None
    error_code: Optional[str] = None
    request_id: Optional[str] = None
    additional_info: Optional[Dict[str, Any]] = None


class DeploymentError(Exception):
    """Base exception for deployment errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        suggestions: Optional[List[str]] = None
    ):
        """Initialize deployment error.

        Args:
            message: Human-readable error message
            category: Error category
            severity: Error severity
            context: Additional context about the error
            cause: Original exception that caused this error
            suggestions: List of suggested fixes
        """
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.cause = cause
        self.suggestions = suggestions or []

    def to_user_message(self) -> str:
        """Convert error to user-friendly message.

        Returns:
            Formatted error message for display to user
        """
        lines = [f"{self.severity.value.upper()}: {self.message}"]

        if self.context.object_key:
            lines.append(f"   Object: {self.context.object_key}")
        if self.context.operation:
            lines.append(f"   Operation: {self.context.operation}")

        if self.cause:
            lines.append(f"   Cause: {str(self.cause)}")

        if self.suggestions:
            lines.append("\nSuggested fixes:")
            for i, suggestion in enumerate(self.suggestions, 1):
                lines.append(f"   {i}. {suggestion}")

        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error
        """
        return {
            'message': self.message,
            'category': self.category.value,
            'severity': self.severity.value,
            'context': {
                'object_key': self.context.object_key,
                'container': self.context.container,
                'operation': self.context.operation,
                'error_code': self.context.error_code,
                'request_id': self.context.request_id,
                'additional_info': self.context.additional_info
            },
            'cause': str(self.cause) if self.cause else None,
            'suggestions': self.suggestions
        }


class ConfigurationError(DeploymentError):
    """Error in settings, connection string or command line input."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            **kwargs
        )


class InvalidVersionFormatError(DeploymentError):
    """The current version does not split into a supported shape."""

    BRANCH_BUILD_SHAPE = '<branch_string>.<build_int>'
    SEMANTIC_SHAPE = '<major_int>.<minor_int>.<patch_int>'

    def __init__(self, raw: str, expected: Optional[str] = None, **kwargs):
        self.raw = raw
        self.expected = expected or (
            f"{self.BRANCH_BUILD_SHAPE} or {self.SEMANTIC_SHAPE}"
        )
        kwargs.setdefault('suggestions', [
            'Use e.g. master.123 for branch builds',
            'Use e.g. 1.2.3 for releases',
        ])
        super().__init__(
            f"Invalid version {raw!r}. Must be {self.expected}",
            category=ErrorCategory.VERSION,
            severity=ErrorSeverity.CRITICAL,
            **kwargs
        )


class CredentialError(DeploymentError):
    """Error related to storage credentials."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.CREDENTIAL,
            severity=ErrorSeverity.CRITICAL,
            **kwargs
        )


class TransientRemoteError(DeploymentError):
    """A single upload, delete or list call failed."""

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.STORAGE, **kwargs):
        super().__init__(
            message,
            category=category,
            severity=ErrorSeverity.ERROR,
            **kwargs
        )


class ItemFailedError(DeploymentError):
    """A batch item failed after all retry attempts were used."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.STORAGE,
            severity=ErrorSeverity.ERROR,
            **kwargs
        )


class ListingFailedError(DeploymentError):
    """The bucket inventory could not be loaded completely."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('suggestions', [
            'Cleanup needs a complete listing, nothing was deleted',
            'Check connectivity and permissions, then run cleanup again',
        ])
        super().__init__(
            message,
            category=ErrorCategory.LISTING,
            severity=ErrorSeverity.CRITICAL,
            **kwargs
        )


class TooManyPagesError(DeploymentError):
    """The listing kept returning continuation tokens past the page limit."""

    def __init__(self, max_pages: int, **kwargs):
        self.max_pages = max_pages
        kwargs.setdefault('suggestions', [
            'Raise the limit with --max-pages if the bucket is genuinely this large',
        ])
        super().__init__(
            f"Listing exceeded the maximum of {max_pages} pages",
            category=ErrorCategory.LISTING,
            severity=ErrorSeverity.CRITICAL,
            **kwargs
        )


class UninitializedError(DeploymentError):
    """An operation was invoked before the store connection was established."""

    def __init__(self, message: str = 'Manager has not been initialized, call init() with an object store first', **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            **kwargs
        )


class ErrorHandler:
    """Handles and categorizes errors from botocore and other sources."""

    # Mapping of S3 error codes to error categories and suggestions
    AWS_ERROR_MAPPING = {
        # Credential errors
        'InvalidAccessKeyId': {
            'category': ErrorCategory.CREDENTIAL,
            'message': 'Access key id is not known to the storage service',
            'suggestions': [
                'Check AccessKeyId in the connection string',
                'Verify the key has not been deactivated'
            ]
        },
        'SignatureDoesNotMatch': {
            'category': ErrorCategory.CREDENTIAL,
            'message': 'Request signature is invalid',
            'suggestions': [
                'Verify SecretAccessKey in the connection string',
                'Check for stray whitespace or quoting in the connection string'
            ]
        },
        'ExpiredToken': {
            'category': ErrorCategory.CREDENTIAL,
            'message': 'Session token has expired',
            'suggestions': [
                'Refresh the session credentials',
                'Re-run with a new SessionToken'
            ]
        },

        # Permission errors
        'AccessDenied': {
            'category': ErrorCategory.PERMISSION,
            'message': 'Access denied - insufficient permissions',
            'suggestions': [
                'Grant s3:PutObject, s3:DeleteObject and s3:ListBucket on the bucket',
                'Check bucket policies for explicit denies'
            ]
        },

        # Storage errors
        'NoSuchBucket': {
            'category': ErrorCategory.STORAGE,
            'message': 'Container does not exist',
            'suggestions': [
                'Check the --container value or the Bucket key of the connection string',
                'Verify the endpoint and region point at the right account'
            ]
        },
        'SlowDown': {
            'category': ErrorCategory.STORAGE,
            'message': 'Request rate exceeded',
            'suggestions': [
                'Lower --chunk-size to reduce concurrent requests',
                'Set --retry-delay to back off between attempts'
            ]
        },

        # Network errors
        'RequestTimeout': {
            'category': ErrorCategory.NETWORK,
            'message': 'Request timed out',
            'suggestions': [
                'Check your network connectivity',
                'Retry the operation'
            ]
        },
        'ServiceUnavailable': {
            'category': ErrorCategory.NETWORK,
            'message': 'Storage service temporarily unavailable',
            'suggestions': [
                'Wait a few moments and retry'
            ]
        },
        'InternalError': {
            'category': ErrorCategory.NETWORK,
            'message': 'Storage service reported an internal error',
            'suggestions': [
                'Retry the operation'
            ]
        }
    }

    def __init__(self):
        """Initialize error handler."""
        self.logger = get_logger(__name__)

    def handle_exception(
        self,
        error: Exception,
        context: Optional[ErrorContext] = None
    ) -> DeploymentError:
        """Handle an exception and convert to DeploymentError.

        Args:
            error: The exception to handle
            context: Additional context about where the error occurred

        Returns:
            DeploymentError with categorization and suggestions
        """
        context = context or ErrorContext()

        if isinstance(error, DeploymentError):
            return error

        if isinstance(error, ClientError):
            return self._handle_aws_error(error, context)

        if isinstance(error, (NoCredentialsError, PartialCredentialsError, ProfileNotFound)):
            return self._handle_credential_error(error, context)

        if isinstance(error, (
            EndpointConnectionError,
            ConnectTimeoutError,
            ReadTimeoutError,
            ConnectionError,
            TimeoutError
        )):
            return self._handle_network_error(error, context)

        if isinstance(error, BotoCoreError):
            return TransientRemoteError(
                message=f"Storage client error: {str(error)}",
                context=context,
                cause=error
            )

        return DeploymentError(
            message=str(error),
            category=ErrorCategory.UNKNOWN,
            severity=ErrorSeverity.ERROR,
            context=context,
            cause=error,
            suggestions=['Check logs for more details']
        )

    def _handle_aws_error(
        self,
        error: ClientError,
        context: ErrorContext
    ) -> TransientRemoteError:
        """Handle botocore ClientError.

        Args:
            error: The ClientError
            context: Error context

        Returns:
            Categorized TransientRemoteError
        """
        error_code = error.response.get('Error', {}).get('Code', 'Unknown')
        error_message = error.response.get('Error', {}).get('Message', str(error))
        request_id = error.response.get('ResponseMetadata', {}).get('RequestId')

        context.error_code = error_code
        context.request_id = request_id

        error_info = self.AWS_ERROR_MAPPING.get(error_code)

        if error_info:
            return TransientRemoteError(
                message=f"{error_info['message']}: {error_message}",
                category=error_info['category'],
                context=context,
                cause=error,
                suggestions=error_info['suggestions']
            )

        return TransientRemoteError(
            message=f"Storage error ({error_code}): {error_message}",
            context=context,
            cause=error,
            suggestions=[
                'Check the storage provider documentation for this error code',
                f'Request ID: {request_id}'
            ]
        )

    def _handle_credential_error(
        self,
        error: Exception,
        context: ErrorContext
    ) -> CredentialError:
        """Handle credential-related errors.

        Args:
            error: The credential error
            context: Error context

        Returns:
            CredentialError
        """
        if isinstance(error, ProfileNotFound):
            return CredentialError(
                message=f"Storage profile not found: {str(error)}",
                context=context,
                cause=error,
                suggestions=[
                    'Check the Profile key of the connection string',
                    'Run `aws configure list-profiles` to see configured profiles'
                ]
            )

        if isinstance(error, NoCredentialsError):
            return CredentialError(
                message='No storage credentials found',
                context=context,
                cause=error,
                suggestions=[
                    'Add AccessKeyId and SecretAccessKey to the connection string',
                    'Or name a configured profile with Profile=<name>'
                ]
            )

        return CredentialError(
            message='Incomplete storage credentials',
            context=context,
            cause=error,
            suggestions=[
                'Ensure both AccessKeyId and SecretAccessKey are provided'
            ]
        )

    def _handle_network_error(
        self,
        error: Exception,
        context: ErrorContext
    ) -> TransientRemoteError:
        """Handle network-related errors.

        Args:
            error: The network error
            context: Error context

        Returns:
            TransientRemoteError in the network category
        """
        return TransientRemoteError(
            message=f'Network error: {str(error)}',
            category=ErrorCategory.NETWORK,
            context=context,
            cause=error,
            suggestions=[
                'Check your internet connection',
                'Verify EndpointUrl in the connection string is reachable'
            ]
        )

    def log_error(self, error: DeploymentError):
        """Log an error with appropriate level.

        Args:
            error: The error to log
        """
        extra = {}
        if error.context.object_key:
            extra['object_key'] = error.context.object_key
        if error.context.operation:
            extra['operation'] = error.context.operation

        log_message = f"{error.category.value} error: {error.message}"

        if error.severity in (ErrorSeverity.CRITICAL, ErrorSeverity.ERROR):
            self.logger.error(log_message, extra=extra)
        elif error.severity == ErrorSeverity.WARNING:
            self.logger.warning(log_message, extra=extra)
        else:
            self.logger.info(log_message, extra=extra)

        self.logger.debug(f"Error details: {error.to_dict()}")


# Global error handler instance
error_handler = ErrorHandler()
