"""AWS Secrets Manager client wrapper."""
import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from .errors import InvalidSecretFormat, SecretFetchError

logger = logging.getLogger(__name__)


class AWSSecretClient:
    """Wrapper around the boto3 Secrets Manager client."""

    def __init__(self, region: Optional[str] = None, profile: Optional[str] = None):
        self.region = region
        self.profile = profile
        self._client = None

    @property
    def client(self):
        """Lazy-initialize client."""
        if self._client is None:
            session_kwargs = {}
            if self.profile:
                session_kwargs['profile_name'] = self.profile
            if self.region:
                session_kwargs['region_name'] = self.region
            logger.debug(f"Creating Secrets Manager client (profile={self.profile}, region={self.region})")
            session = boto3.session.Session(**session_kwargs)
            self._client = session.client('secretsmanager')
        return self._client

    def fetch_secret(
        self,
        identifier: str,
        version_id: Optional[str] = None,
        version_stage: Optional[str] = None,
    ) -> str:
        """
        Fetch a secret string from AWS Secrets Manager.

        Args:
            identifier: Secret name or ARN
            version_id: Optional VersionId to pin
            version_stage: Optional VersionStage label (e.g. AWSPREVIOUS)

        Returns:
            The SecretString of the requested version

        Raises:
            SecretFetchError: If the call fails
            InvalidSecretFormat: If the secret only holds binary data
        """
        request = {'SecretId': identifier}
        if version_id:
            request['VersionId'] = version_id
        if version_stage:
            request['VersionStage'] = version_stage

        try:
            logger.info(f"Fetching secret {identifier} from AWS Secrets Manager")
            response = self.client.get_secret_value(**request)
        except NoCredentialsError as e:
            raise SecretFetchError(f"Failed to get secret {identifier}: AWS authentication failed: {e}") from e
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            if error_code == 'ResourceNotFoundException':
                raise SecretFetchError(f"Failed to get secret {identifier}: secret not found") from e
            elif error_code == 'AccessDeniedException':
                raise SecretFetchError(f"Failed to get secret {identifier}: access denied") from e
            raise SecretFetchError(f"Failed to get secret {identifier}: {e}") from e
        except BotoCoreError as e:
            raise SecretFetchError(f"Failed to get secret {identifier}: {e}") from e

        secret_string = response.get('SecretString')
        if secret_string is None:
            raise InvalidSecretFormat(
                f"Secret {identifier} has no SecretString (binary secrets are not supported)"
            )
        return secret_string
