"""Workflow converting a SecretProviderClass into a Kubernetes Secret."""
import json
import logging
from typing import Any, Dict, Optional, Union

from ..domains.aws_client import AWSSecretClient
from ..domains.config_loader import load_config
from ..domains.descriptor import decode_objects, parse_descriptor
from ..domains.errors import FileIOError, InvalidSecretFormat
from ..domains.extractor import JMESPathEngine, extract_value, kind_of
from ..domains.gcp_client import GCPSecretClient
from ..domains.manifest import build_manifest, dump_manifest, encode_value, write_manifest
from ..domains.models import ObjectSpec

logger = logging.getLogger(__name__)


def get_secret_client(config: Dict[str, Any]):
    """Build the secret store client selected by config['backend']."""
    backend = config.get("backend", "aws")
    if backend == "gcp":
        gcp = config.get("gcp") or {}
        return GCPSecretClient(
            project_id=gcp.get("project_id"),
            service_account_path=gcp.get("service_account_path"),
        )
    aws = config.get("aws") or {}
    return AWSSecretClient(region=aws.get("region"), profile=aws.get("profile"))


def resolve_secret(client, obj: ObjectSpec) -> Dict[str, Any]:
    """
    Fetch one secret and parse it as a JSON object.

    Args:
        client: Secret store client exposing fetch_secret()
        obj: Object spec naming the secret

    Returns:
        The decoded JSON object

    Raises:
        SecretFetchError: If the store call fails
        InvalidSecretFormat: If the payload is not a JSON object
    """
    payload = client.fetch_secret(
        obj.object_name,
        version_id=obj.object_version,
        version_stage=obj.object_version_label,
    )
    if isinstance(payload, bytes):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidSecretFormat(f"Secret {obj.object_name} is not valid UTF-8: {e}") from e
    if not isinstance(payload, str):
        raise InvalidSecretFormat(
            f"Secret {obj.object_name} returned {type(payload).__name__}, expected a string"
        )

    try:
        document = json.loads(payload)
    except json.JSONDecodeError as e:
        raise InvalidSecretFormat(f"Invalid JSON in secret {obj.object_name}: {e}") from e

    if not isinstance(document, dict):
        raise InvalidSecretFormat(
            f"Invalid JSON in secret {obj.object_name}: expected object, got {kind_of(document)}"
        )
    return document


def collect_secret_data(objects, client, engine: Optional[JMESPathEngine] = None) -> Dict[str, str]:
    """
    Resolve every secretsmanager object and extract its aliases.

    Objects of any other type are skipped. Aliases are written in processing
    order, so a repeated alias keeps the last value.

    Returns:
        Mapping of alias to base64-encoded value
    """
    secret_data: Dict[str, str] = {}

    for obj in objects:
        if not obj.is_secrets_manager:
            logger.debug(f"Skipping {obj.object_name}: unsupported objectType '{obj.object_type}'")
            continue

        document = resolve_secret(client, obj)
        for item in obj.paths:
            value = extract_value(document, item.path, engine)
            if item.alias in secret_data:
                logger.warning(
                    f"Alias '{item.alias}' from {obj.object_name} overwrites an earlier value"
                )
            secret_data[item.alias] = encode_value(value)

        logger.info(f"Extracted {len(obj.paths)} value(s) from {obj.object_name}")

    return secret_data


def render_secret(
    descriptor_text: Union[bytes, str],
    client,
    engine: Optional[JMESPathEngine] = None,
) -> Dict[str, Any]:
    """
    Convert SecretProviderClass contents to a Secret manifest dict.

    Raises:
        SpcToSecretError: On the first failure in any stage
    """
    descriptor = parse_descriptor(descriptor_text)
    objects = decode_objects(descriptor.objects_raw)
    secret_data = collect_secret_data(objects, client, engine)
    return build_manifest(descriptor, secret_data)


def convert_file(
    input_path: str,
    output_path: str,
    client=None,
    config: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Read a SecretProviderClass file and write the resulting Secret manifest.

    Args:
        input_path: SecretProviderClass YAML file
        output_path: Destination for the Secret YAML
        client: Secret store client (built from config if not provided)
        config: Loaded configuration (loaded from the default location if not provided)

    Returns:
        The manifest that was written

    Behavior:
        - Nothing is written unless every object and path resolves
        - The output file is replaced atomically
    """
    try:
        with open(input_path, 'rb') as f:
            descriptor_text = f.read()
    except OSError as e:
        raise FileIOError(f"Failed to read file {input_path}: {e}") from e

    if client is None:
        client = get_secret_client(config if config is not None else load_config())

    manifest = render_secret(descriptor_text, client)
    write_manifest(dump_manifest(manifest), output_path)
    return manifest
