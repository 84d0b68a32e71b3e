from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, List, Optional, Tuple, Union

import numpy as np


# -----------------------------
# Wire-level code tables
# -----------------------------

class NodeKind(IntEnum):
    META = 0
    GEOMETRY = 1
    IMAGE = 2


class ElementType(IntEnum):
    UINT8 = 0
    INT32 = 1
    FLOAT32 = 2
    FLOAT64 = 3

    @property
    def size(self) -> int:
        return _ELEMENT_SIZES[self]

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(_ELEMENT_DTYPES[self])


_ELEMENT_SIZES = {
    ElementType.UINT8: 1,
    ElementType.INT32: 4,
    ElementType.FLOAT32: 4,
    ElementType.FLOAT64: 8,
}

_ELEMENT_DTYPES = {
    ElementType.UINT8: np.uint8,
    ElementType.INT32: np.int32,
    ElementType.FLOAT32: np.float32,
    ElementType.FLOAT64: np.float64,
}


class ImageKind(IntEnum):
    CUBE = 0
    IMAGE_1D = 1
    IMAGE_2D = 2
    IMAGE_3D = 3

    @property
    def dimensions(self) -> int:
        # number of resolution fields stored on the wire
        return 2 if self is ImageKind.CUBE else int(self)


class MetaKind(IntEnum):
    INT64 = 0
    DOUBLE = 1
    NODE = 2
    TEXT = 3
    BINARY = 4
    META = 5


# -----------------------------
# Decoded tree
#
# Every array below is an owned, native-order numpy copy; nothing in the
# tree refers back to the buffer it was parsed from. Arrays are marked
# read-only by the reader.
# -----------------------------

@dataclass
class Layer:
    name: str
    component_count: int
    element_type: ElementType
    data: np.ndarray

    @property
    def element_count(self) -> int:
        """Number of stack elements covered (``data.size / component_count``)."""
        if self.component_count == 0:
            return 0
        return self.data.size // self.component_count

    def components(self) -> np.ndarray:
        """The data viewed as ``(elements, component_count)``."""
        return self.data.reshape(self.element_count, self.component_count)


@dataclass
class LayerStack:
    """Layers sharing one element count (``length``)."""

    length: int = 0
    layers: List[Layer] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(self.layers)

    def __getitem__(self, key: Union[int, str]) -> Layer:
        if isinstance(key, str):
            layer = self.find(key)
            if layer is None:
                raise KeyError(key)
            return layer
        return self.layers[key]

    def find(self, name: str) -> Optional[Layer]:
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    @property
    def names(self) -> List[str]:
        return [layer.name for layer in self.layers]


@dataclass
class GeometryBody:
    vertex_stack: LayerStack
    corner_stack: LayerStack
    edge_stack: LayerStack
    face_stack: LayerStack

    @property
    def vertex_count(self) -> int:
        return self.vertex_stack.length

    @property
    def corner_count(self) -> int:
        return self.corner_stack.length

    @property
    def face_count(self) -> int:
        return self.face_stack.length


@dataclass
class ImageBody:
    image_kind: ImageKind
    resolution: Tuple[int, int, int]  # fields absent on the wire are 1
    image_stack: LayerStack

    @property
    def texel_count(self) -> int:
        return self.image_stack.length


NodeBody = Union[GeometryBody, ImageBody]


@dataclass
class MetaEntry:
    name: str
    kind: MetaKind
    # ndarray for INT64 / DOUBLE / NODE, str for TEXT, bytes for BINARY,
    # List[MetaEntry] for META
    value: Union[np.ndarray, str, bytes, List["MetaEntry"]]

    @property
    def children(self) -> List["MetaEntry"]:
        return self.value if self.kind is MetaKind.META else []

    def find(self, name: str) -> Optional["MetaEntry"]:
        return _find_meta(self.children, name)


def _find_meta(entries: List[MetaEntry], name: str) -> Optional[MetaEntry]:
    for entry in entries:
        if entry.name == name:
            return entry
    return None


@dataclass
class HxaNode:
    kind: NodeKind
    metadata: List[MetaEntry]
    body: Optional[NodeBody] = None

    @property
    def geometry(self) -> Optional[GeometryBody]:
        return self.body if isinstance(self.body, GeometryBody) else None

    @property
    def image(self) -> Optional[ImageBody]:
        return self.body if isinstance(self.body, ImageBody) else None

    def find_meta(self, name: str) -> Optional[MetaEntry]:
        return _find_meta(self.metadata, name)


@dataclass
class HxaFile:
    version: int  # low 8 bits of the stored 32-bit field
    nodes: List[HxaNode]
    raw_version: Optional[int] = None
