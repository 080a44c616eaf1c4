"""GCP Secret Manager client wrapper."""
import os
import logging
from typing import Optional
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import secretmanager

from .errors import ConfigError, InvalidSecretFormat, SecretFetchError

logger = logging.getLogger(__name__)


class GCPSecretClient:
    """Wrapper around GCP Secret Manager client."""

    def __init__(self, project_id: Optional[str] = None, service_account_path: Optional[str] = None):
        self._project_id = project_id
        self._client = None

        if service_account_path:
            os.environ['GOOGLE_APPLICATION_CREDENTIALS'] = service_account_path
            logger.info(f"Set GOOGLE_APPLICATION_CREDENTIALS from config: {service_account_path}")

    @property
    def client(self) -> secretmanager.SecretManagerServiceClient:
        """Lazy-initialize client."""
        if self._client is None:
            self._client = secretmanager.SecretManagerServiceClient()
        return self._client

    def get_project_id(self) -> str:
        """
        Get GCP project ID from environment variable or configuration.

        Priority order:
        1. GCP_PROJECT environment variable (allows override)
        2. Project ID passed in from --project-id or the config file

        Raises:
            ConfigError: If no project ID is available
        """
        gcp_project_env = os.getenv("GCP_PROJECT")
        if gcp_project_env:
            logger.debug(f"Using GCP_PROJECT from environment: {gcp_project_env}")
            return gcp_project_env

        if self._project_id:
            logger.debug(f"Using project_id from config: {self._project_id}")
            return self._project_id

        raise ConfigError(
            "Project ID not found. Please set GCP_PROJECT environment variable, "
            "pass --project-id, or configure gcp.project_id in config file"
        )

    def resource_name(self, identifier: str, version: Optional[str] = None) -> str:
        """Build the secret version resource name for identifier."""
        version = version or "latest"
        if identifier.startswith("projects/"):
            if "/versions/" in identifier:
                return identifier
            return f"{identifier}/versions/{version}"
        return f"projects/{self.get_project_id()}/secrets/{identifier}/versions/{version}"

    def fetch_secret(
        self,
        identifier: str,
        version_id: Optional[str] = None,
        version_stage: Optional[str] = None,
    ) -> str:
        """
        Fetch secret from GCP Secret Manager.

        Args:
            identifier: Secret name or full resource name
            version_id: Version number to access
            version_stage: Version alias to access when no version number is given

        Returns:
            Secret payload decoded as UTF-8

        Raises:
            SecretFetchError: If the call fails
            InvalidSecretFormat: If the payload is not UTF-8
        """
        name = self.resource_name(identifier, version_id or version_stage)
        try:
            logger.info(f"Fetching secret {name} from GCP Secret Manager")
            response = self.client.access_secret_version(request={"name": name})
        except google_exceptions.NotFound as e:
            raise SecretFetchError(f"Failed to get secret {identifier}: secret not found") from e
        except google_exceptions.PermissionDenied as e:
            raise SecretFetchError(f"Failed to get secret {identifier}: access denied") from e
        except google_exceptions.GoogleAPIError as e:
            raise SecretFetchError(f"Failed to get secret {identifier}: {e}") from e
        except auth_exceptions.GoogleAuthError as e:
            raise SecretFetchError(f"Failed to get secret {identifier}: GCP authentication failed: {e}") from e

        try:
            return response.payload.data.decode("UTF-8")
        except UnicodeDecodeError as e:
            raise InvalidSecretFormat(f"Secret {identifier} is not valid UTF-8: {e}") from e
