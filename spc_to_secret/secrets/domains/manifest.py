"""Kubernetes Secret manifest assembly and output."""
import base64
import logging
import os
import stat
import tempfile
from typing import Any, Dict

import yaml

from .errors import FileIOError, OutputEncodeError
from .models import Descriptor

logger = logging.getLogger(__name__)

MANIFEST_MODE = 0o644


def _current_umask() -> int:
    """Read the process umask without changing it."""
    mask = os.umask(0)
    os.umask(mask)
    return mask


def encode_value(value: str) -> str:
    """Standard padded base64 of the UTF-8 bytes of value."""
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def build_manifest(descriptor: Descriptor, data: Dict[str, str]) -> Dict[str, Any]:
    """Wrap encoded data in an Opaque Secret envelope."""
    return {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": {
            "name": descriptor.name,
            "namespace": descriptor.namespace,
        },
        "type": "Opaque",
        "data": dict(data),
    }


def dump_manifest(manifest: Dict[str, Any]) -> str:
    """
    Serialize a manifest to YAML.

    Raises:
        OutputEncodeError: If the manifest holds values YAML cannot represent
    """
    try:
        return yaml.safe_dump(manifest, sort_keys=False, default_flow_style=False)
    except yaml.YAMLError as e:
        raise OutputEncodeError(f"Failed to marshal output YAML: {e}") from e


def write_manifest(text: str, output_path: str) -> None:
    """
    Write manifest text to output_path.

    The text goes to a temporary file beside the target which is then renamed
    over it, so a failed write never leaves a partial manifest behind. A new
    file gets mode 0644 less the umask; an existing file keeps its mode.

    Raises:
        FileIOError: If the file cannot be written
    """
    directory = os.path.dirname(os.path.abspath(output_path))
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=".spc-to-secret-", suffix=".yaml", dir=directory)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        if os.path.exists(output_path):
            mode = stat.S_IMODE(os.stat(output_path).st_mode)
        else:
            mode = MANIFEST_MODE & ~_current_umask()
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, output_path)
        tmp_path = None
    except OSError as e:
        raise FileIOError(f"Failed to write file {output_path}: {e}") from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)

    logger.info(f"Wrote Secret manifest to {output_path}")
