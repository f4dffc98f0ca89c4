"""Core scene components and reflection over their members."""

from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional

__all__ = [
    "MemberKind",
    "Transform",
    "Camera",
    "PerspectiveCamera",
    "OrthographicCamera",
    "ActiveCamera",
    "EditorCamera",
    "RenderingModel",
    "DirectionalLight",
    "Atmosphere",
    "Clouds",
    "Hidden",
    "ComponentRegistry",
    "ComponentWrapper",
    "core_registry",
]


class MemberKind(Enum):
    """Reflected type of a component member."""

    F32 = "f32"
    I32 = "i32"
    U32 = "u32"
    I64 = "i64"
    U64 = "u64"
    BOOL = "bool"
    VEC2 = "glm::vec2"
    VEC3 = "glm::vec3"
    VEC4 = "glm::vec4"
    MAT3 = "glm::mat3"
    MAT4 = "glm::mat4"
    QUAT = "glm::quat"
    STRING = "std::string"
    UUID = "lr::UUID"


# Kinds that member iteration understands; it stops at the first other kind.
_VISITABLE = frozenset(MemberKind) - {MemberKind.BOOL, MemberKind.MAT3}

_INT_RANGES = {
    MemberKind.I32: (-(1 << 31), (1 << 31) - 1),
    MemberKind.U32: (0, (1 << 32) - 1),
    MemberKind.I64: (-(1 << 63), (1 << 63) - 1),
    MemberKind.U64: (0, (1 << 64) - 1),
}

_VEC_SIZES = {
    MemberKind.VEC2: 2,
    MemberKind.VEC3: 3,
    MemberKind.VEC4: 4,
    MemberKind.QUAT: 4,
}

_MAT_SIZES = {MemberKind.MAT3: 3, MemberKind.MAT4: 4}

_ZERO_MAT4 = tuple((0.0, 0.0, 0.0, 0.0) for _ in range(4))


def _member(kind: MemberKind, default: Any) -> Any:
    return field(default=default, metadata={"kind": kind})


@dataclass
class Transform:
    position: tuple = _member(MemberKind.VEC3, (0.0, 0.0, 0.0))
    rotation: tuple = _member(MemberKind.VEC3, (0.0, 0.0, 0.0))
    scale: tuple = _member(MemberKind.VEC3, (1.0, 1.0, 1.0))


@dataclass
class Camera:
    fov: float = _member(MemberKind.F32, 90.0)
    aspect_ratio: float = _member(MemberKind.F32, 1.777)
    near_clip: float = _member(MemberKind.F32, 0.1)
    far_clip: float = _member(MemberKind.F32, 1000.0)
    axis_velocity: tuple = _member(MemberKind.VEC3, (0.0, 0.0, 0.0))
    velocity_mul: float = _member(MemberKind.F32, 1.0)
    freeze_frustum: bool = _member(MemberKind.BOOL, False)
    frustum_projection_view_mat: tuple = _member(MemberKind.MAT4, _ZERO_MAT4)


@dataclass
class PerspectiveCamera:
    pass


@dataclass
class OrthographicCamera:
    pass


@dataclass
class ActiveCamera:
    pass


@dataclass
class EditorCamera:
    pass


@dataclass
class RenderingModel:
    uuid: Optional[uuid.UUID] = _member(MemberKind.UUID, None)


@dataclass
class DirectionalLight:
    direction: tuple = _member(MemberKind.VEC2, (90.0, 45.0))
    intensity: float = _member(MemberKind.F32, 10.0)


@dataclass
class Atmosphere:
    rayleigh_scattering: tuple = _member(MemberKind.VEC3, (5.802, 13.558, 33.100))
    rayleigh_density: float = _member(MemberKind.F32, 8.0)
    mie_scattering: tuple = _member(MemberKind.VEC3, (3.996, 3.996, 3.996))
    mie_density: float = _member(MemberKind.F32, 1.2)
    mie_extinction: float = _member(MemberKind.F32, 4.44)
    ozone_absorption: tuple = _member(MemberKind.VEC3, (0.650, 1.881, 0.085))
    ozone_height: float = _member(MemberKind.F32, 25.0)
    ozone_thickness: float = _member(MemberKind.F32, 15.0)
    aerial_gain_per_slice: float = _member(MemberKind.F32, 8.0)


@dataclass
class Clouds:
    bounds: tuple = _member(MemberKind.VEC2, (1.0, 10.0))
    shape_noise_scale: float = _member(MemberKind.F32, 100.0)
    shape_noise_weights: tuple = _member(MemberKind.VEC4, (0.625, 0.25, 0.15, 0.625))
    detail_noise_scale: float = _member(MemberKind.F32, 100.0)
    detail_noise_weights: tuple = _member(MemberKind.VEC4, (0.625, 0.25, 0.15, 0.0625))
    detail_noise_influence: float = _member(MemberKind.F32, 1.0)
    coverage: float = _member(MemberKind.F32, 0.5)
    general_density: float = _member(MemberKind.F32, 4.0)
    phase_values: tuple = _member(MemberKind.VEC3, (0.427, -0.335, 0.15))
    extinction: float = _member(MemberKind.F32, 0.22)
    scattering: float = _member(MemberKind.F32, 0.16)
    darkness_threshold: float = _member(MemberKind.F32, 0.02)
    powder_intensity: float = _member(MemberKind.F32, 10.0)
    clouds_step_count: int = _member(MemberKind.I32, 64)
    sun_step_count: int = _member(MemberKind.I32, 5)
    draw_distance: float = _member(MemberKind.F32, 2000.0)
    cloud_type: float = _member(MemberKind.F32, 0.0)


@dataclass
class Hidden:
    """Entities carrying this tag are not serialized."""


def _reflected_members(component_type: type) -> list[tuple[str, MemberKind]]:
    return [
        (f.name, f.metadata["kind"])
        for f in dataclasses.fields(component_type)
        if "kind" in f.metadata
    ]


def _coerce(kind: MemberKind, value: Any) -> Any:
    if kind is MemberKind.F32:
        return float(value)
    if kind in _INT_RANGES:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{kind.value} member needs an int, got {value!r}")
        low, high = _INT_RANGES[kind]
        if not low <= value <= high:
            raise ValueError(f"{value} does not fit in {kind.value}")
        return value
    if kind is MemberKind.BOOL:
        return bool(value)
    if kind in _VEC_SIZES:
        size = _VEC_SIZES[kind]
        comps = tuple(float(c) for c in value)
        if len(comps) != size:
            raise ValueError(f"{kind.value} needs {size} components, got {len(comps)}")
        return comps
    if kind in _MAT_SIZES:
        size = _MAT_SIZES[kind]
        rows = tuple(tuple(float(c) for c in row) for row in value)
        if len(rows) != size or any(len(row) != size for row in rows):
            raise ValueError(f"{kind.value} needs a {size}x{size} matrix")
        return rows
    if kind is MemberKind.STRING:
        if not isinstance(value, str):
            raise TypeError(f"string member needs a str, got {value!r}")
        return value
    if value is None or isinstance(value, uuid.UUID):
        return value
    if isinstance(value, str):
        return uuid.UUID(value)
    raise TypeError(f"UUID member needs a UUID or str, got {value!r}")


class ComponentRegistry:
    """Known component types, addressable by name."""

    def __init__(self) -> None:
        self._by_name: dict[str, type] = {}

    def register(self, component_type: type, name: Optional[str] = None) -> type:
        """Register ``component_type`` under ``name`` (its class name by default)."""
        if not dataclasses.is_dataclass(component_type) or not isinstance(component_type, type):
            raise TypeError(f"{component_type!r} is not a dataclass type")
        key = name if name is not None else component_type.__name__
        existing = self._by_name.get(key)
        if existing is not None and existing is not component_type:
            raise ValueError(f"component name {key!r} is already taken")
        self._by_name[key] = component_type
        return component_type

    def lookup(self, name: str) -> Optional[type]:
        """Component type registered under ``name``, or ``None``."""
        return self._by_name.get(name)

    def is_known(self, name: str) -> bool:
        return name in self._by_name

    def components(self) -> dict[str, type]:
        """Registered components by name, in registration order."""
        return dict(self._by_name)


_CORE_COMPONENTS = (
    Transform,
    Camera,
    PerspectiveCamera,
    OrthographicCamera,
    ActiveCamera,
    EditorCamera,
    RenderingModel,
    DirectionalLight,
    Atmosphere,
    Clouds,
    Hidden,
)


def core_registry() -> ComponentRegistry:
    """A registry holding every core component."""
    registry = ComponentRegistry()
    for component_type in _CORE_COMPONENTS:
        registry.register(component_type)
    return registry


class ComponentWrapper:
    """Reflective access to the members of one component instance."""

    def __init__(self, component: Any, registry: ComponentRegistry) -> None:
        component_type = type(component)
        path = next(
            (name for name, t in registry.components().items() if t is component_type),
            None,
        )
        if path is None:
            raise KeyError(f"component type {component_type.__name__} is not registered")
        self.component = component
        self.path = path
        self.name = path.rsplit("::", 1)[-1]
        self._members = _reflected_members(component_type)
        self._kinds = dict(self._members)

    def has_component(self) -> bool:
        """True when the component carries data; tags have none."""
        return bool(self._members)

    def for_each(self) -> Iterator[tuple[int, str, MemberKind, Any]]:
        """Yield ``(index, name, kind, value)`` up to the first unsupported member."""
        for index, (name, kind) in enumerate(self._members):
            if kind not in _VISITABLE:
                return
            yield index, name, kind, getattr(self.component, name)

    def set(self, name: str, value: Any) -> None:
        """Assign ``value`` to member ``name``, converting it to the member's kind."""
        try:
            kind = self._kinds[name]
        except KeyError:
            raise KeyError(f"{self.path} has no member {name!r}") from None
        setattr(self.component, name, _coerce(kind, value))