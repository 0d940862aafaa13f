"""boto3 session and client handling for S3-compatible stores."""

import boto3
from botocore.config import Config
from typing import Optional, Dict, Any
from storage_deploy.config.models import ConnectionSettings
from storage_deploy.utils.logging import get_logger

logger = get_logger(__name__)


class AWSClientManager:
    """Manages the boto3 session and clients built from connection settings."""

    def __init__(
        self,
        connection: ConnectionSettings,
        max_pool_connections: int = 50,
        connect_timeout: float = 10.0,
        read_timeout: float = 60.0
    ):
        """Initialize AWS client manager.

        Args:
            connection: Parsed connection settings
            max_pool_connections: Size of the HTTP connection pool, matched to the chunk size
            connect_timeout: Seconds to wait for a connection
            read_timeout: Seconds to wait for a response
        """
        self.connection = connection
        self.max_pool_connections = max_pool_connections
        self._session: Optional[boto3.Session] = None
        self._clients: Dict[str, Any] = {}

        # botocore retries are limited to a single attempt; RetryStrategy owns retries
        self._boto_config = Config(
            max_pool_connections=max_pool_connections,
            retries={
                'mode': 'standard',
                'total_max_attempts': 1
            },
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
            s3={'addressing_style': connection.addressing_style}
        )

    @property
    def session(self) -> boto3.Session:
        """Get or create boto3 session.

        Returns:
            Configured boto3 session
        """
        if self._session is None:
            kwargs = {}
            if self.connection.profile:
                kwargs['profile_name'] = self.connection.profile
            if self.connection.region:
                kwargs['region_name'] = self.connection.region
            if self.connection.access_key_id:
                kwargs['aws_access_key_id'] = self.connection.access_key_id
            if self.connection.secret_access_key:
                kwargs['aws_secret_access_key'] = self.connection.secret_access_key
            if self.connection.session_token:
                kwargs['aws_session_token'] = self.connection.session_token

            self._session = boto3.Session(**kwargs)
            logger.info(
                f"Created storage session - Region: {self._session.region_name}, "
                f"Endpoint: {self.connection.endpoint_url or 'default'}"
            )

        return self._session

    def get_client(self, service_name: str = 's3'):
        """Get a cached boto3 client for a service.

        Args:
            service_name: AWS service name

        Returns:
            Boto3 client for the service
        """
        if service_name in self._clients:
            return self._clients[service_name]

        client = self.session.client(
            service_name,
            endpoint_url=self.connection.endpoint_url,
            config=self._boto_config
        )
        self._clients[service_name] = client

        logger.debug(f"Created {service_name} client (pool size: {self.max_pool_connections})")

        return client

