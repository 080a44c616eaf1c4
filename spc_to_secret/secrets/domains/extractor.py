"""JMESPath extraction of scalar values from secret payloads."""
import logging
from typing import Any, Optional

import jmespath
from jmespath.exceptions import JMESPathError

from .errors import QuerySyntaxError, TypeMismatchError

logger = logging.getLogger(__name__)


class JMESPathEngine:
    """Path-query engine backed by the jmespath library."""

    def evaluate(self, document: Any, expression: str) -> Any:
        try:
            compiled = jmespath.compile(expression)
            # Arity and unknown-function errors only surface at search time.
            return compiled.search(document)
        except JMESPathError as e:
            raise QuerySyntaxError(f"JMESPath error for '{expression}': {e}") from e


_DEFAULT_ENGINE = JMESPathEngine()


def kind_of(value: Any) -> str:
    """Name the JSON kind of a decoded value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def extract_value(document: Any, path: str, engine: Optional[JMESPathEngine] = None) -> str:
    """
    Evaluate a path expression and return its string result.

    Args:
        document: Parsed JSON secret payload
        path: JMESPath expression
        engine: Query engine exposing evaluate(document, expression)

    Returns:
        The string found at path

    Raises:
        QuerySyntaxError: If the expression is malformed
        TypeMismatchError: If the result is anything but a single string
    """
    engine = engine or _DEFAULT_ENGINE
    value = engine.evaluate(document, path)
    if not isinstance(value, str):
        raise TypeMismatchError(path, kind_of(value))
    return value
