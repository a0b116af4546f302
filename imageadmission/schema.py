"""API group, version and kind identifiers, and a registry of known object types."""

from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class GroupKind:
    """A kind qualified by its API group."""

    group: str
    kind: str

    def __str__(self) -> str:
        return f"{self.kind}.{self.group}" if self.group else self.kind


@dataclass(frozen=True)
class GroupResource:
    """A resource qualified by its API group."""

    group: str
    resource: str

    def __str__(self) -> str:
        return f"{self.resource}.{self.group}" if self.group else self.resource


@dataclass(frozen=True)
class GroupVersionKind:
    """A kind qualified by its API group and version."""

    group: str
    version: str
    kind: str

    def group_kind(self) -> GroupKind:
        """Return the kind qualified by group only."""
        return GroupKind(self.group, self.kind)

    def __str__(self) -> str:
        return f"{GroupVersion(self.group, self.version)}, Kind={self.kind}"


@dataclass(frozen=True)
class GroupVersionResource:
    """A resource qualified by its API group and version."""

    group: str
    version: str
    resource: str

    def group_resource(self) -> GroupResource:
        """Return the resource qualified by group only."""
        return GroupResource(self.group, self.resource)

    def __str__(self) -> str:
        return f"{GroupVersion(self.group, self.version)}, Resource={self.resource}"


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with one of its versions."""

    group: str
    version: str

    def with_kind(self, kind: str) -> GroupVersionKind:
        """Qualify ``kind`` with this group and version."""
        return GroupVersionKind(self.group, self.version, kind)

    def with_resource(self, resource: str) -> GroupVersionResource:
        """Qualify ``resource`` with this group and version."""
        return GroupVersionResource(self.group, self.version, resource)

    def __str__(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version


class UnknownKindError(LookupError):
    """Raised when a type or kind has not been registered with a scheme."""


class Scheme:
    """A registry mapping group-version-kinds to Python types and back."""

    def __init__(self) -> None:
        self._gvk_to_type: Dict[GroupVersionKind, type] = {}
        self._type_to_gvks: Dict[type, List[GroupVersionKind]] = {}

    def add_known_types(self, group_version: GroupVersion, *types: type) -> None:
        """Register each type under ``group_version``, using the class name as its kind."""
        for obj_type in types:
            if not isinstance(obj_type, type):
                raise TypeError(f"{obj_type!r} is not a type")
            gvk = group_version.with_kind(obj_type.__name__)
            existing = self._gvk_to_type.get(gvk)
            if existing is not None and existing is not obj_type:
                raise ValueError(
                    f"double registration of different types for {gvk}: "
                    f"{existing.__qualname__} and {obj_type.__qualname__}"
                )
            self._gvk_to_type[gvk] = obj_type
            gvks = self._type_to_gvks.setdefault(obj_type, [])
            if gvk not in gvks:
                gvks.append(gvk)

    def object_kind(self, obj: object) -> Tuple[GroupVersionKind, ...]:
        """Return every group-version-kind under which the type of ``obj`` is registered."""
        gvks = self._type_to_gvks.get(type(obj))
        if not gvks:
            raise UnknownKindError(f"no kind is registered for the type {type(obj).__qualname__}")
        return tuple(gvks)

    def new(self, gvk: GroupVersionKind) -> object:
        """Create an empty object of the type registered for ``gvk``."""
        obj_type = self._gvk_to_type.get(gvk)
        if obj_type is None:
            raise UnknownKindError(f"no kind {gvk.kind!r} is registered for version {gvk.group}/{gvk.version}")
        return obj_type()

    def recognizes(self, gvk: GroupVersionKind) -> bool:
        """Return True if a type is registered for ``gvk``."""
        return gvk in self._gvk_to_type

    def all_known_types(self) -> Dict[GroupVersionKind, type]:
        """Return a copy of every registration."""
        return dict(self._gvk_to_type)