"""Tests for the AWS and GCP secret store clients."""
from unittest import mock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError, NoCredentialsError
from google.api_core import exceptions as google_exceptions

from spc_to_secret.secrets.domains import aws_client, gcp_client
from spc_to_secret.secrets.domains.aws_client import AWSSecretClient
from spc_to_secret.secrets.domains.errors import ConfigError, InvalidSecretFormat, SecretFetchError
from spc_to_secret.secrets.domains.gcp_client import GCPSecretClient


def _client_error(code):
    return ClientError({"Error": {"Code": code, "Message": "boom"}}, "GetSecretValue")


@pytest.fixture
def aws():
    """AWS client with a mocked boto3 client."""
    client = AWSSecretClient()
    client._client = mock.MagicMock()
    return client


class TestAWSSecretClient:
    """Test suite for AWSSecretClient."""

    def test_fetch_secret_string(self, aws):
        """Test the SecretString is returned."""
        aws._client.get_secret_value.return_value = {"SecretString": '{"a": "b"}'}

        assert aws.fetch_secret("db/creds") == '{"a": "b"}'
        aws._client.get_secret_value.assert_called_once_with(SecretId="db/creds")

    def test_version_parameters(self, aws):
        """Test version id and stage are forwarded."""
        aws._client.get_secret_value.return_value = {"SecretString": "{}"}

        aws.fetch_secret("db/creds", version_id="v1", version_stage="AWSPREVIOUS")

        aws._client.get_secret_value.assert_called_once_with(
            SecretId="db/creds", VersionId="v1", VersionStage="AWSPREVIOUS"
        )

    def test_binary_secret_rejected(self, aws):
        """Test a SecretBinary-only response raises InvalidSecretFormat."""
        aws._client.get_secret_value.return_value = {"SecretBinary": b"\x00\x01"}

        with pytest.raises(InvalidSecretFormat):
            aws.fetch_secret("bin")

    @pytest.mark.parametrize("code,message", [
        ("ResourceNotFoundException", "not found"),
        ("AccessDeniedException", "access denied"),
        ("InternalServiceError", "InternalServiceError"),
    ])
    def test_client_errors(self, aws, code, message):
        """Test service errors become SecretFetchError naming the secret."""
        aws._client.get_secret_value.side_effect = _client_error(code)

        with pytest.raises(SecretFetchError) as exc_info:
            aws.fetch_secret("db/creds")

        assert "db/creds" in str(exc_info.value)
        assert message in str(exc_info.value)

    def test_no_credentials(self, aws):
        """Test missing credentials become SecretFetchError."""
        aws._client.get_secret_value.side_effect = NoCredentialsError()

        with pytest.raises(SecretFetchError) as exc_info:
            aws.fetch_secret("db/creds")
        assert "authentication" in str(exc_info.value)

    def test_network_error(self, aws):
        """Test connection failures become SecretFetchError."""
        aws._client.get_secret_value.side_effect = EndpointConnectionError(endpoint_url="https://x")

        with pytest.raises(SecretFetchError):
            aws.fetch_secret("db/creds")

    def test_client_created_once_with_session_options(self):
        """Test the boto3 client is built lazily from profile and region."""
        with mock.patch.object(aws_client.boto3.session, "Session") as session_cls:
            client = AWSSecretClient(region="eu-west-1", profile="prod")
            first = client.client
            second = client.client

        session_cls.assert_called_once_with(profile_name="prod", region_name="eu-west-1")
        session_cls.return_value.client.assert_called_once_with("secretsmanager")
        assert first is second


@pytest.fixture
def gcp(monkeypatch):
    """GCP client with a mocked Secret Manager client."""
    monkeypatch.delenv("GCP_PROJECT", raising=False)
    client = GCPSecretClient(project_id="test-project")
    client._client = mock.MagicMock()
    return client


class TestGCPSecretClient:
    """Test suite for GCPSecretClient."""

    def test_fetch_latest_by_default(self, gcp):
        """Test the latest version of a short name is requested."""
        gcp._client.access_secret_version.return_value.payload.data = b'{"a": "b"}'

        assert gcp.fetch_secret("db-creds") == '{"a": "b"}'
        gcp._client.access_secret_version.assert_called_once_with(
            request={"name": "projects/test-project/secrets/db-creds/versions/latest"}
        )

    def test_version_selection(self, gcp):
        """Test objectVersion wins over objectVersionLabel."""
        assert gcp.resource_name("s", "3") == "projects/test-project/secrets/s/versions/3"
        gcp._client.access_secret_version.return_value.payload.data = b"{}"

        gcp.fetch_secret("s", version_id="3", version_stage="prod")
        gcp._client.access_secret_version.assert_called_once_with(
            request={"name": "projects/test-project/secrets/s/versions/3"}
        )

    def test_full_resource_names(self, gcp):
        """Test full resource names are used as given."""
        assert gcp.resource_name("projects/p/secrets/s") == "projects/p/secrets/s/versions/latest"
        assert gcp.resource_name("projects/p/secrets/s/versions/2") == "projects/p/secrets/s/versions/2"

    def test_env_project_overrides_config(self, gcp, monkeypatch):
        """Test GCP_PROJECT takes priority."""
        monkeypatch.setenv("GCP_PROJECT", "env-project")
        assert gcp.get_project_id() == "env-project"

    def test_missing_project(self, monkeypatch):
        """Test a missing project ID raises ConfigError."""
        monkeypatch.delenv("GCP_PROJECT", raising=False)
        with pytest.raises(ConfigError):
            GCPSecretClient().get_project_id()

    @pytest.mark.parametrize("error,message", [
        (google_exceptions.NotFound("gone"), "not found"),
        (google_exceptions.PermissionDenied("no"), "access denied"),
        (google_exceptions.ServiceUnavailable("down"), "down"),
    ])
    def test_api_errors(self, gcp, error, message):
        """Test API errors become SecretFetchError."""
        gcp._client.access_secret_version.side_effect = error

        with pytest.raises(SecretFetchError) as exc_info:
            gcp.fetch_secret("db-creds")
        assert message in str(exc_info.value)

    def test_non_utf8_payload(self, gcp):
        """Test a non-UTF-8 payload raises InvalidSecretFormat."""
        gcp._client.access_secret_version.return_value.payload.data = b"\xff\xfe"

        with pytest.raises(InvalidSecretFormat):
            gcp.fetch_secret("db-creds")

    def test_service_account_exported(self, monkeypatch, tmp_path):
        """Test service_account_path sets GOOGLE_APPLICATION_CREDENTIALS."""
        sa_file = tmp_path / "sa.json"
        sa_file.write_text("{}")
        # monkeypatch restores the original value afterwards
        monkeypatch.setenv("GOOGLE_APPLICATION_CREDENTIALS", "placeholder")

        GCPSecretClient(service_account_path=str(sa_file))

        assert gcp_client.os.environ["GOOGLE_APPLICATION_CREDENTIALS"] == str(sa_file)
