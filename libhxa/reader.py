"""libhxa.reader

Single-pass HxA reader.

- We check the magic number, then read the version and node count.
- Then we read exactly ``node_count`` nodes, each with its metadata tree
  and, for geometry and image nodes, their layer stacks.
- Bytes are consumed strictly in order; nothing is re-read.

Every array in the result is an owned copy (see ``load_array``), so the
input buffer can be dropped or reused as soon as ``parse_hxa`` returns.
"""

from __future__ import annotations

import logging
import struct
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, Type, Union

import numpy as np

from .errors import (
    InternalError,
    InvalidMagicNumber,
    InvalidUtf8,
    TrailingData,
    UnexpectedElementType,
    UnexpectedEndOfData,
    UnexpectedImageKind,
    UnexpectedMetaKind,
    UnexpectedNodeKind,
    _UnexpectedCode,
)
from .model import (
    ElementType,
    GeometryBody,
    HxaFile,
    HxaNode,
    ImageBody,
    ImageKind,
    Layer,
    LayerStack,
    MetaEntry,
    MetaKind,
    NodeKind,
)

logger = logging.getLogger(__name__)

HXA_MAGIC = b"HxA\x00"
HXA_MAGIC_INT = struct.unpack("<I", HXA_MAGIC)[0]

Buffer = Union[bytes, bytearray, memoryview]


@dataclass
class _Bin:
    data: memoryview
    ofs: int = 0

    def tell(self) -> int:
        return self.ofs

    def remaining(self) -> int:
        return len(self.data) - self.ofs

    def read(self, n: int) -> memoryview:
        if n > self.remaining():
            raise UnexpectedEndOfData(self.ofs, n, self.remaining())
        b = self.data[self.ofs : self.ofs + n]
        self.ofs += n
        return b

    def _unpack(self, fmt: str):
        raw = self.read(struct.calcsize(fmt))
        try:
            return struct.unpack(fmt, raw)[0]
        except struct.error as e:
            raise InternalError(e) from e

    def u8(self) -> int:
        return self.read(1)[0]

    def s8(self) -> int:
        return self._unpack("<b")

    def u16(self) -> int:
        return self._unpack("<H")

    def s16(self) -> int:
        return self._unpack("<h")

    def u32(self) -> int:
        return self._unpack("<I")

    def s32(self) -> int:
        return self._unpack("<i")

    def u64(self) -> int:
        return self._unpack("<Q")

    def s64(self) -> int:
        return self._unpack("<q")

    def f32(self) -> float:
        return self._unpack("<f")

    def f64(self) -> float:
        return self._unpack("<d")


# ----------------------------
# Code tables
# ----------------------------

_NODE_KINDS = {0: NodeKind.META, 1: NodeKind.GEOMETRY, 2: NodeKind.IMAGE}

_ELEMENT_TYPES = {
    0: ElementType.UINT8,
    1: ElementType.INT32,
    2: ElementType.FLOAT32,
    3: ElementType.FLOAT64,
}

_IMAGE_KINDS = {
    0: ImageKind.CUBE,
    1: ImageKind.IMAGE_1D,
    2: ImageKind.IMAGE_2D,
    3: ImageKind.IMAGE_3D,
}

_META_KINDS = {
    0: MetaKind.INT64,
    1: MetaKind.DOUBLE,
    2: MetaKind.NODE,
    3: MetaKind.TEXT,
    4: MetaKind.BINARY,
    5: MetaKind.META,
}


def _read_code(b: _Bin, table: Dict[int, object], error: Type[_UnexpectedCode]):
    ofs = b.tell()
    code = b.u8()
    try:
        return table[code]
    except KeyError:
        raise error(code, ofs) from None


def read_node_kind(b: _Bin) -> NodeKind:
    return _read_code(b, _NODE_KINDS, UnexpectedNodeKind)


def read_element_type(b: _Bin) -> ElementType:
    return _read_code(b, _ELEMENT_TYPES, UnexpectedElementType)


def read_image_kind(b: _Bin) -> ImageKind:
    return _read_code(b, _IMAGE_KINDS, UnexpectedImageKind)


def read_meta_kind(b: _Bin) -> MetaKind:
    return _read_code(b, _META_KINDS, UnexpectedMetaKind)


# ----------------------------
# Arrays and strings
# ----------------------------

# floats are decoded through the unsigned integer of the same width so
# their bit patterns (signaling NaNs included) come through unchanged
_STRUCT_CODES = {
    np.dtype(np.uint8): ("B", np.uint8),
    np.dtype(np.int32): ("i", np.int32),
    np.dtype(np.uint32): ("I", np.uint32),
    np.dtype(np.int64): ("q", np.int64),
    np.dtype(np.float32): ("I", np.uint32),
    np.dtype(np.float64): ("Q", np.uint64),
}


def load_array(b: _Bin, dtype, count: int, byteorder: Optional[str] = None) -> np.ndarray:
    """Read ``count`` little-endian elements of ``dtype`` as a new array.

    ``byteorder`` is the host byte order and defaults to ``sys.byteorder``.
    On little-endian hosts the bytes are copied in bulk; otherwise each
    element is decoded on its own. Both paths return a fresh, aligned,
    native-order, read-only array that does not alias the input.
    """
    dtype = np.dtype(dtype)
    code, wire_dtype = _STRUCT_CODES[dtype]
    raw = b.read(dtype.itemsize * count)
    if (byteorder or sys.byteorder) == "little":
        wire = np.dtype(wire_dtype)
        arr = np.frombuffer(raw, dtype=wire.newbyteorder("<")).astype(wire).view(dtype)
    else:
        fmt = "<" + code
        try:
            values = [v for (v,) in struct.iter_unpack(fmt, raw)]
        except struct.error as e:
            raise InternalError(e) from e
        arr = np.array(values, dtype=wire_dtype).view(dtype)
    arr.setflags(write=False)
    return arr


def _load_bytes(b: _Bin, count: int) -> np.ndarray:
    # single-byte elements have no byte order
    arr = np.frombuffer(b.read(count), dtype=np.uint8).copy()
    arr.setflags(write=False)
    return arr


def _decode_utf8(b: _Bin, n: int) -> str:
    ofs = b.tell()
    raw = bytes(b.read(n))
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUtf8(e, ofs) from e


def read_name(b: _Bin) -> str:
    return _decode_utf8(b, b.u8())


# ----------------------------
# Metadata
# ----------------------------

def _read_meta_value(b: _Bin, kind: MetaKind, length: int, byteorder: Optional[str]):
    if kind is MetaKind.INT64:
        return load_array(b, np.int64, length, byteorder)
    if kind is MetaKind.DOUBLE:
        return load_array(b, np.float64, length, byteorder)
    if kind is MetaKind.NODE:
        return load_array(b, np.uint32, length, byteorder)
    if kind is MetaKind.TEXT:
        return _decode_utf8(b, length)
    if kind is MetaKind.BINARY:
        return bytes(b.read(length))
    raise AssertionError(kind)


def read_metadata(b: _Bin, count: int, byteorder: Optional[str] = None) -> List[MetaEntry]:
    """Read ``count`` metadata entries, including nested META entries.

    Nesting is followed with an explicit stack, so hostile inputs with
    very deep trees cannot exhaust the interpreter's recursion limit.
    """
    root: List[MetaEntry] = []
    pending = [[root, count]]  # (target list, entries still to read)
    while pending:
        top = pending[-1]
        if top[1] == 0:
            pending.pop()
            continue
        top[1] -= 1

        name = read_name(b)
        kind = read_meta_kind(b)
        length = b.u32()
        if kind is MetaKind.META:
            children: List[MetaEntry] = []
            top[0].append(MetaEntry(name=name, kind=kind, value=children))
            pending.append([children, length])
        else:
            value = _read_meta_value(b, kind, length, byteorder)
            top[0].append(MetaEntry(name=name, kind=kind, value=value))
    return root


# ----------------------------
# Layers
# ----------------------------

def read_layer(b: _Bin, length: int, byteorder: Optional[str] = None) -> Layer:
    name = read_name(b)
    component_count = b.u8()
    element_type = read_element_type(b)
    count = component_count * length
    if element_type is ElementType.UINT8:
        data = _load_bytes(b, count)
    else:
        data = load_array(b, element_type.dtype, count, byteorder)
    return Layer(
        name=name,
        component_count=component_count,
        element_type=element_type,
        data=data,
    )


def read_layer_stack(b: _Bin, length: int, byteorder: Optional[str] = None) -> LayerStack:
    layer_count = b.u32()
    layers = [read_layer(b, length, byteorder) for _ in range(layer_count)]
    return LayerStack(length=length, layers=layers)


# ----------------------------
# Nodes
# ----------------------------

def _read_geometry(b: _Bin, version: int, byteorder: Optional[str]) -> GeometryBody:
    vertex_count = b.u32()
    vertex_stack = read_layer_stack(b, vertex_count, byteorder)
    edge_corner_count = b.u32()
    corner_stack = read_layer_stack(b, edge_corner_count, byteorder)
    # edge stacks were introduced with version 3
    if version > 2:
        edge_stack = read_layer_stack(b, edge_corner_count, byteorder)
    else:
        edge_stack = LayerStack(length=edge_corner_count)
    face_count = b.u32()
    face_stack = read_layer_stack(b, face_count, byteorder)
    return GeometryBody(
        vertex_stack=vertex_stack,
        corner_stack=corner_stack,
        edge_stack=edge_stack,
        face_stack=face_stack,
    )


def _read_image(b: _Bin, byteorder: Optional[str]) -> ImageBody:
    image_kind = read_image_kind(b)
    dims = image_kind.dimensions
    resolution = (
        b.u32(),
        b.u32() if dims >= 2 else 1,
        b.u32() if dims >= 3 else 1,
    )
    size = resolution[0] * resolution[1] * resolution[2]
    if image_kind is ImageKind.CUBE:
        size *= 6
    image_stack = read_layer_stack(b, size, byteorder)
    return ImageBody(image_kind=image_kind, resolution=resolution, image_stack=image_stack)


def read_node(b: _Bin, version: int, byteorder: Optional[str] = None) -> HxaNode:
    kind = read_node_kind(b)
    metadata = read_metadata(b, b.u32(), byteorder)

    body = None
    if kind is NodeKind.GEOMETRY:
        body = _read_geometry(b, version, byteorder)
    elif kind is NodeKind.IMAGE:
        body = _read_image(b, byteorder)
    return HxaNode(kind=kind, metadata=metadata, body=body)


def parse_hxa(data: Buffer, byteorder: Optional[str] = None) -> HxaFile:
    """Decode a complete HxA document held in memory.

    Fails with an ``HxaError`` subclass on the first malformed field, and
    with ``TrailingData`` if bytes remain after the last declared node.
    """
    b = _Bin(memoryview(data).cast("B"))

    magic = b.u32()
    if magic != HXA_MAGIC_INT:
        raise InvalidMagicNumber(magic)

    raw_version = b.u32()
    # only the low byte is kept as the document version
    version = raw_version & 0xFF
    if raw_version > 0xFF:
        logger.warning("HxA version field %d does not fit in 8 bits, using %d", raw_version, version)
    node_count = b.u32()
    logger.debug("HxA version %d, %d nodes", version, node_count)

    nodes: List[HxaNode] = []
    for i in range(node_count):
        ofs = b.tell()
        node = read_node(b, version, byteorder)
        logger.debug("node %d: %s at %d (%d metadata entries)", i, node.kind.name, ofs, len(node.metadata))
        nodes.append(node)

    if b.remaining():
        raise TrailingData(b.tell(), b.remaining())

    return HxaFile(version=version, nodes=nodes, raw_version=raw_version)


def read_hxa(path: str, byteorder: Optional[str] = None) -> HxaFile:
    with open(path, "rb") as f:
        data = f.read()
    logger.debug("read %d bytes from %s", len(data), path)
    return parse_hxa(data, byteorder)
