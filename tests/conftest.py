"""Shared fixtures for spc-to-secret tests."""
import json

import pytest
import yaml

from spc_to_secret.secrets.domains.errors import SecretFetchError


SAMPLE_SPC = """\
apiVersion: secrets-store.csi.x-k8s.io/v1
kind: SecretProviderClass
metadata:
  name: my-secret
  namespace: default
spec:
  provider: aws
  parameters:
    objects: |
      - objectName: "db/creds"
        objectType: "secretsmanager"
        jmesPath:
          - path: username
            objectAlias: DB_USER
"""


def make_spc(objects, name="my-secret", namespace="default"):
    """Build SecretProviderClass YAML embedding objects as a YAML string."""
    return yaml.safe_dump({
        "apiVersion": "secrets-store.csi.x-k8s.io/v1",
        "kind": "SecretProviderClass",
        "metadata": {"name": name, "namespace": namespace},
        "spec": {
            "provider": "aws",
            "parameters": {"objects": yaml.safe_dump(objects, sort_keys=False)},
        },
    }, sort_keys=False)


class FakeSecretStore:
    """In-memory stand-in for a secret store client."""

    def __init__(self, secrets=None):
        self.secrets = dict(secrets or {})
        self.calls = []

    def fetch_secret(self, identifier, version_id=None, version_stage=None):
        self.calls.append((identifier, version_id, version_stage))
        if identifier not in self.secrets:
            raise SecretFetchError(f"Failed to get secret {identifier}: secret not found")
        value = self.secrets[identifier]
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return value


@pytest.fixture
def sample_spc_text():
    return SAMPLE_SPC


@pytest.fixture
def db_store():
    """Store holding the db/creds secret."""
    return FakeSecretStore({"db/creds": {"username": "admin", "password": "x"}})
