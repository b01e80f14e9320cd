"""
Conversions between SDF text encodings and geometry values.

Poses are encoded in SDF as "x y z roll pitch yaw", with the rotation
being Rz(yaw) * Ry(pitch) * Rx(roll). They are decoded into an Isometry3,
a rigid transform backed by numpy and scipy's Rotation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from lxml import etree
from scipy.spatial.transform import Rotation

from core.errors import Invalid

TextSource = Union[str, etree._Element, None]


@dataclass(eq=False)
class Isometry3:
    """Rigid transform: a rotation followed by a translation."""
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: Rotation = field(default_factory=Rotation.identity)

    def __post_init__(self) -> None:
        self.translation = np.asarray(self.translation, dtype=float).reshape(3)

    @classmethod
    def identity(cls) -> "Isometry3":
        return cls()

    @classmethod
    def from_xyz_rpy(cls, xyz: Sequence[float], rpy: Sequence[float]) -> "Isometry3":
        return cls(np.array(xyz, dtype=float), Rotation.from_euler("xyz", rpy))

    def __mul__(self, other: "Isometry3") -> "Isometry3":
        return Isometry3(
            self.translation + self.rotation.apply(other.translation),
            self.rotation * other.rotation,
        )

    def apply(self, point: Sequence[float]) -> np.ndarray:
        return self.rotation.apply(np.asarray(point, dtype=float)) + self.translation

    def inverse(self) -> "Isometry3":
        inv = self.rotation.inv()
        return Isometry3(-inv.apply(self.translation), inv)

    def rpy(self) -> np.ndarray:
        return self.rotation.as_euler("xyz")

    def is_identity(self, tol: float = 1e-9) -> bool:
        return self.approx(Isometry3.identity(), tol)

    def approx(self, other: "Isometry3", tol: float = 1e-6) -> bool:
        if not np.allclose(self.translation, other.translation, atol=tol):
            return False
        # q and -q encode the same rotation
        q1 = self.rotation.as_quat()
        q2 = other.rotation.as_quat()
        return bool(np.allclose(q1, q2, atol=tol) or np.allclose(q1, -q2, atol=tol))

    def __repr__(self) -> str:
        xyz = " ".join(_format_number(v) for v in self.translation)
        rpy = " ".join(_format_number(v) for v in self.rpy())
        return f"Isometry3({xyz} {rpy})"


def _format_number(value: float) -> str:
    return repr(float(value))


def _text_and_node(source: TextSource) -> Tuple[Optional[str], Optional[etree._Element]]:
    if source is None:
        return None, None
    if isinstance(source, etree._Element):
        return (source.text or ""), source
    return source, None


def _fail(node: Optional[etree._Element], message: str) -> Invalid:
    if node is not None:
        return Invalid.at(node, message)
    return Invalid(message)


def parse_numbers(source: TextSource, expected: int) -> Optional[list[float]]:
    """Parse a whitespace-separated list of exactly `expected` numbers.

    Returns None if source is None.
    """
    text, node = _text_and_node(source)
    if text is None:
        return None
    stripped = text.strip()
    tokens = stripped.split()
    values = []
    for token in tokens:
        try:
            values.append(float(token))
        except ValueError:
            raise _fail(node, f"invalid number '{token}' in '{stripped}'") from None
    if len(values) != expected:
        raise _fail(node, f"'{stripped}' has {len(values)} entries, expected {expected}")
    return values


def pose_to_xyz_rpy(pose: TextSource) -> Tuple[list[float], list[float]]:
    values = parse_numbers(pose, 6)
    if values is None:
        return [0.0, 0.0, 0.0], [0.0, 0.0, 0.0]
    return values[:3], values[3:]


def pose_to_isometry(pose: TextSource) -> Isometry3:
    """Decode a SDF pose. None decodes to the identity."""
    xyz, rpy = pose_to_xyz_rpy(pose)
    return Isometry3.from_xyz_rpy(xyz, rpy)


def isometry_to_pose(iso: Isometry3, tag: str = "pose") -> etree._Element:
    """Encode a transform as a new SDF pose element."""
    values = list(iso.translation) + list(iso.rpy())
    element = etree.Element(tag)
    element.text = " ".join(_format_number(v) for v in values)
    return element


def vector3_to_array(vector3: TextSource) -> np.ndarray:
    """Decode a SDF 3-vector. None decodes to zero."""
    values = parse_numbers(vector3, 3)
    if values is None:
        return np.zeros(3)
    return np.array(values)


def array_to_vector3(vector: Sequence[float], tag: str = "xyz") -> etree._Element:
    element = etree.Element(tag)
    element.text = " ".join(_format_number(v) for v in vector)
    return element


def to_boolean(value: TextSource) -> bool:
    text, node = _text_and_node(value)
    text = (text or "").strip()
    if text in ("true", "1"):
        return True
    if text in ("false", "0"):
        return False
    raise _fail(node, f"invalid boolean value '{text}', expected true or false")


__all__ = [
    "Isometry3",
    "parse_numbers",
    "pose_to_xyz_rpy",
    "pose_to_isometry",
    "isometry_to_pose",
    "vector3_to_array",
    "array_to_vector3",
    "to_boolean",
]
