"""libhxa.mesh

Helpers for turning a geometry node into plain vertex / polygon arrays.

In the corner reference layer every corner holds a vertex index; the last
corner of a polygon stores ``-index - 1`` instead, which is how polygon
boundaries are encoded.
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from . import conventions as hc
from .errors import HxaConventionError
from .model import ElementType, GeometryBody, Layer

_FLOAT_TYPES = (ElementType.FLOAT32, ElementType.FLOAT64)


def _base_layer(stack, index: int, name: str, components: int, what: str) -> Layer:
    if len(stack) <= index:
        raise HxaConventionError(f"Geometry has no {what} layer")
    layer = stack[index]
    if layer.name != name:
        raise HxaConventionError(f"{what} layer is named {layer.name!r}, expected {name!r}")
    if layer.component_count != components:
        raise HxaConventionError(
            f"{what} layer has {layer.component_count} components, expected {components}"
        )
    return layer


def base_vertices(geometry: GeometryBody) -> np.ndarray:
    """Vertex positions as an ``(n, 3)`` float64 array."""
    layer = _base_layer(
        geometry.vertex_stack,
        hc.BASE_VERTEX_LAYER_ID,
        hc.BASE_VERTEX_LAYER_NAME,
        hc.BASE_VERTEX_LAYER_COMPONENTS,
        "vertex",
    )
    if layer.element_type not in _FLOAT_TYPES:
        raise HxaConventionError(
            f"Non-floating-point vertex data ({layer.element_type.name}) is not supported"
        )
    return layer.data.astype(np.float64).reshape(-1, 3)


def base_references(geometry: GeometryBody) -> np.ndarray:
    layer = _base_layer(
        geometry.corner_stack,
        hc.BASE_CORNER_LAYER_ID,
        hc.BASE_CORNER_LAYER_NAME,
        hc.BASE_CORNER_LAYER_COMPONENTS,
        "corner reference",
    )
    if layer.element_type is not hc.BASE_CORNER_LAYER_TYPE:
        raise HxaConventionError(
            f"corner reference layer is {layer.element_type.name}, expected INT32"
        )
    return layer.data


def split_polygons(references: np.ndarray, vertex_count: Optional[int] = None) -> List[np.ndarray]:
    """Split a corner reference stream into per-polygon vertex index arrays.

    With ``vertex_count`` given, every decoded index must be below it.
    """
    refs = np.asarray(references, dtype=np.int64)
    if refs.size == 0:
        return []
    ends = np.flatnonzero(refs < 0)
    if ends.size == 0 or ends[-1] != refs.size - 1:
        raise HxaConventionError("Corner references do not end with a closed polygon")

    indices = refs.copy()
    indices[ends] = -indices[ends] - 1
    if vertex_count is not None:
        bad = np.flatnonzero(indices >= vertex_count)
        if bad.size:
            raise HxaConventionError(
                f"Corner {bad[0]} references vertex {indices[bad[0]]}, mesh has {vertex_count} vertices"
            )
    return np.split(indices, ends[:-1] + 1)


def triangulate(references: np.ndarray, vertex_count: Optional[int] = None) -> np.ndarray:
    """Fan-triangulate every polygon; returns an ``(m, 3)`` index array."""
    triangles = []
    for poly in split_polygons(references, vertex_count):
        if poly.size < 3:
            raise HxaConventionError(
                f"A polygon must have 3 or more vertices, this one has {poly.size}"
            )
        for i in range(1, poly.size - 1):
            triangles.append((poly[0], poly[i], poly[i + 1]))
    if not triangles:
        return np.zeros((0, 3), dtype=np.int64)
    return np.array(triangles, dtype=np.int64)
