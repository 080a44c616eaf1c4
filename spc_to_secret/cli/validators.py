"""Input validation for CLI arguments."""
import os

from spc_to_secret.secrets.domains.errors import UsageError


def validate_input_path(path: str) -> None:
    """
    Validate the SecretProviderClass path points at a readable file.

    Raises:
        UsageError: If the path is missing or not a file
    """
    if not path:
        raise UsageError("Input path cannot be empty")

    if not os.path.exists(path):
        raise UsageError(f"Input file does not exist: {path}")

    if not os.path.isfile(path):
        raise UsageError(f"Input path is not a file: {path}")


def validate_output_path(path: str) -> None:
    """
    Validate the output path can be created.

    The parent directory must already exist; it is never created.

    Raises:
        UsageError: If the path is empty, a directory, or its parent is missing
    """
    if not path:
        raise UsageError("Output path cannot be empty")

    if os.path.isdir(path):
        raise UsageError(f"Output path is a directory: {path}")

    parent = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(parent):
        raise UsageError(f"Output directory does not exist: {parent}")
