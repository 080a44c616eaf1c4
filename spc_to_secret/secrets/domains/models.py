"""Domain models for SecretProviderClass conversion."""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

SECRETS_MANAGER_TYPE = "secretsmanager"


@dataclass(frozen=True)
class Descriptor:
    """Identity of the output Secret plus the raw embedded object list."""
    name: str
    namespace: str
    objects_raw: str


@dataclass(frozen=True)
class PathSpec:
    """One JMESPath query and the Secret data key it populates."""
    path: str
    alias: str

    def to_dict(self) -> Dict[str, str]:
        return {"path": self.path, "objectAlias": self.alias}


@dataclass(frozen=True)
class ObjectSpec:
    """One external secret referenced by the SecretProviderClass."""
    object_name: str
    object_type: str
    paths: Tuple[PathSpec, ...] = field(default_factory=tuple)
    object_version: Optional[str] = None
    object_version_label: Optional[str] = None

    @property
    def is_secrets_manager(self) -> bool:
        return self.object_type == SECRETS_MANAGER_TYPE

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "objectName": self.object_name,
            "objectType": self.object_type,
        }
        if self.object_version is not None:
            data["objectVersion"] = self.object_version
        if self.object_version_label is not None:
            data["objectVersionLabel"] = self.object_version_label
        data["jmesPath"] = [p.to_dict() for p in self.paths]
        return data
