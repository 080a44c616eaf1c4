"""SecretProviderClass descriptor parsing."""
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from .errors import ObjectListError, ParseError
from .models import Descriptor, ObjectSpec, PathSpec

logger = logging.getLogger(__name__)


def _require_mapping(value: Any, field_name: str, error=ParseError) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise error(f"Expected '{field_name}' to be a mapping, got {type(value).__name__}")
    return value


def _not_a_string(field_name: str, value: Any, error=ParseError):
    message = f"Expected '{field_name}' to be a string, got {type(value).__name__}"
    if not isinstance(value, (dict, list)):
        message += f" {value!r}; quote the value so YAML reads it as a string"
    return error(message)


def _require_string(mapping: Dict[str, Any], key: str, field_name: str, error=ParseError) -> str:
    if key not in mapping or mapping[key] is None:
        raise error(f"Missing '{field_name}'")
    value = mapping[key]
    if not isinstance(value, str):
        raise _not_a_string(field_name, value, error)
    return value


def _optional_string(mapping: Dict[str, Any], key: str, field_name: str) -> Optional[str]:
    value = mapping.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise _not_a_string(field_name, value, ObjectListError)
    return value


def parse_descriptor(raw: Union[bytes, str]) -> Descriptor:
    """
    Parse a SecretProviderClass YAML document.

    Args:
        raw: Document contents

    Returns:
        Descriptor with the Secret name, namespace and the embedded objects text

    Raises:
        ParseError: If the YAML is malformed or a required field is absent
    """
    try:
        document = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse SecretProviderClass YAML: {e}") from e

    if document is None:
        raise ParseError("SecretProviderClass document is empty")
    document = _require_mapping(document, "<document>")

    metadata = _require_mapping(document.get("metadata"), "metadata")
    name = _require_string(metadata, "name", "metadata.name")
    namespace = _require_string(metadata, "namespace", "metadata.namespace")

    spec = _require_mapping(document.get("spec"), "spec")
    parameters = _require_mapping(spec.get("parameters"), "spec.parameters")
    objects_raw = _require_string(parameters, "objects", "spec.parameters.objects")

    logger.debug(f"Parsed SecretProviderClass {namespace}/{name}")
    return Descriptor(name=name, namespace=namespace, objects_raw=objects_raw)


def _decode_path(item: Any, where: str) -> PathSpec:
    item = _require_mapping(item, where, ObjectListError)
    return PathSpec(
        path=_require_string(item, "path", f"{where}.path", ObjectListError),
        alias=_require_string(item, "objectAlias", f"{where}.objectAlias", ObjectListError),
    )


def _decode_object(item: Any, index: int) -> ObjectSpec:
    where = f"objects[{index}]"
    item = _require_mapping(item, where, ObjectListError)

    jmes_paths = item.get("jmesPath")
    if jmes_paths is None:
        jmes_paths = []
    if not isinstance(jmes_paths, list):
        raise ObjectListError(
            f"Expected '{where}.jmesPath' to be a list, got {type(jmes_paths).__name__}"
        )

    return ObjectSpec(
        object_name=_require_string(item, "objectName", f"{where}.objectName", ObjectListError),
        object_type=_require_string(item, "objectType", f"{where}.objectType", ObjectListError),
        paths=tuple(
            _decode_path(p, f"{where}.jmesPath[{i}]") for i, p in enumerate(jmes_paths)
        ),
        object_version=_optional_string(item, "objectVersion", f"{where}.objectVersion"),
        object_version_label=_optional_string(
            item, "objectVersionLabel", f"{where}.objectVersionLabel"
        ),
    )


def decode_objects(objects_raw: str) -> List[ObjectSpec]:
    """
    Decode the YAML list embedded in `spec.parameters.objects`.

    Raises:
        ObjectListError: If the text is not a YAML list of object mappings
    """
    try:
        items = yaml.safe_load(objects_raw)
    except yaml.YAMLError as e:
        raise ObjectListError(f"Failed to parse objects: {e}") from e

    if items is None:
        return []
    if not isinstance(items, list):
        raise ObjectListError(f"Expected objects to be a list, got {type(items).__name__}")

    objects = [_decode_object(item, i) for i, item in enumerate(items)]
    logger.debug(f"Decoded {len(objects)} object(s)")
    return objects


def encode_objects(objects: Iterable[ObjectSpec]) -> str:
    """Serialize object specs back to the embedded YAML list form."""
    return yaml.safe_dump(
        [obj.to_dict() for obj in objects],
        sort_keys=False,
        default_flow_style=False,
    )
