"""Tests for error categorization."""

import logging

import pytest
from botocore.exceptions import (
    ClientError,
    NoCredentialsError,
    PartialCredentialsError,
    ProfileNotFound,
    ReadTimeoutError,
)

from storage_deploy.utils.errors import (
    CredentialError,
    DeploymentError,
    ErrorCategory,
    ErrorContext,
    ErrorHandler,
    ErrorSeverity,
    InvalidVersionFormatError,
    TooManyPagesError,
    TransientRemoteError,
)


@pytest.fixture
def handler():
    return ErrorHandler()


def client_error(code):
    return ClientError(
        {"Error": {"Code": code, "Message": "msg"}, "ResponseMetadata": {"RequestId": "rid"}},
        "PutObject",
    )


class TestHandleException:
    def test_deployment_errors_pass_through(self, handler):
        error = TooManyPagesError(50)

        assert handler.handle_exception(error) is error

    @pytest.mark.parametrize(
        "code, category",
        [
            ("InvalidAccessKeyId", ErrorCategory.CREDENTIAL),
            ("SignatureDoesNotMatch", ErrorCategory.CREDENTIAL),
            ("AccessDenied", ErrorCategory.PERMISSION),
            ("NoSuchBucket", ErrorCategory.STORAGE),
            ("SlowDown", ErrorCategory.STORAGE),
            ("ServiceUnavailable", ErrorCategory.NETWORK),
            ("SomethingNew", ErrorCategory.STORAGE),
        ],
    )
    def test_client_error_categories(self, handler, code, category):
        error = handler.handle_exception(client_error(code), ErrorContext(object_key="k"))

        assert isinstance(error, TransientRemoteError)
        assert error.category == category
        assert error.context.error_code == code
        assert error.context.request_id == "rid"
        assert error.context.object_key == "k"
        assert error.suggestions

    def test_no_credentials(self, handler):
        error = handler.handle_exception(NoCredentialsError())

        assert isinstance(error, CredentialError)
        assert error.severity == ErrorSeverity.CRITICAL

    def test_partial_credentials(self, handler):
        error = handler.handle_exception(PartialCredentialsError(provider="env", cred_var="secret"))

        assert isinstance(error, CredentialError)
        assert "Incomplete" in error.message

    def test_missing_profile(self, handler):
        error = handler.handle_exception(ProfileNotFound(profile="deployer"), ErrorContext(operation="connect"))

        assert isinstance(error, CredentialError)
        assert "deployer" in error.message
        assert error.context.operation == "connect"

    def test_timeouts_are_network_errors(self, handler):
        error = handler.handle_exception(ReadTimeoutError(endpoint_url="http://x"))

        assert isinstance(error, TransientRemoteError)
        assert error.category == ErrorCategory.NETWORK

    def test_unknown_errors(self, handler):
        cause = RuntimeError("odd")

        error = handler.handle_exception(cause)

        assert type(error) is DeploymentError
        assert error.category == ErrorCategory.UNKNOWN
        assert error.cause is cause


class TestDeploymentError:
    def test_user_message(self):
        error = TransientRemoteError(
            "upload failed",
            context=ErrorContext(object_key="1.2.3/a", operation="put_object"),
            cause=RuntimeError("socket closed"),
            suggestions=["Retry"],
        )

        message = error.to_user_message()

        assert message.startswith("ERROR: upload failed")
        assert "Object: 1.2.3/a" in message
        assert "Operation: put_object" in message
        assert "Cause: socket closed" in message
        assert "1. Retry" in message

    def test_to_dict(self):
        error = InvalidVersionFormatError("master")

        data = error.to_dict()

        assert data["category"] == "version"
        assert data["severity"] == "critical"
        assert "master" in data["message"]
        assert data["context"]["object_key"] is None


class TestLogError:
    def test_errors_log_one_line_with_structured_fields(self, handler, caplog):
        error = TransientRemoteError(
            "Request rate exceeded",
            context=ErrorContext(object_key="1.2.3/a", operation="put_object"),
        )

        with caplog.at_level(logging.DEBUG, logger="storage_deploy.utils.errors"):
            handler.log_error(error)

        [summary, details] = caplog.records
        assert summary.levelno == logging.ERROR
        assert summary.getMessage() == "storage error: Request rate exceeded"
        assert summary.object_key == "1.2.3/a"
        assert summary.operation == "put_object"
        assert details.levelno == logging.DEBUG

    @pytest.mark.parametrize(
        "severity, level",
        [
            (ErrorSeverity.CRITICAL, logging.ERROR),
            (ErrorSeverity.WARNING, logging.WARNING),
            (ErrorSeverity.INFO, logging.INFO),
        ],
    )
    def test_level_follows_severity(self, handler, caplog, severity, level):
        error = DeploymentError("something", severity=severity)

        with caplog.at_level(logging.INFO, logger="storage_deploy.utils.errors"):
            handler.log_error(error)

        assert [r.levelno for r in caplog.records] == [level]
        assert not hasattr(caplog.records[0], "object_key")
