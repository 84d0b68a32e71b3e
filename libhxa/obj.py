"""libhxa.obj

HxA -> Wavefront OBJ export.

Only geometry nodes produce output; each becomes its own ``o`` object.
Polygons are written as they are stored (n-gons are not triangulated).
Every geometry node is checked before the first line is written, so a
node that breaks the layer conventions leaves no partial output behind.
"""

from __future__ import annotations

import logging
from typing import List, TextIO, Tuple

import numpy as np

from .mesh import base_references, base_vertices, split_polygons
from .model import HxaFile, NodeKind

logger = logging.getLogger(__name__)


def _collect_objects(hxa: HxaFile, scale: float) -> List[Tuple[int, np.ndarray, List[np.ndarray]]]:
    objects = []
    for i, node in enumerate(hxa.nodes):
        geometry = node.geometry
        if geometry is None:
            if node.kind is NodeKind.IMAGE:
                logger.info("node %d: images cannot be stored in OBJ, skipped", i)
            continue

        verts = base_vertices(geometry) * scale
        polygons = split_polygons(base_references(geometry), len(verts))
        logger.debug("node %d: %d vertices, %d polygons", i, len(verts), len(polygons))
        objects.append((i, verts, polygons))
    return objects


def _write_objects(objects, f: TextIO) -> None:
    vertex_base = 1  # OBJ indices are 1-based and global to the file
    for i, verts, polygons in objects:
        f.write(f"o node{i}\n")
        for (x, y, z) in verts:
            f.write(f"v {x:.6f} {y:.6f} {z:.6f}\n")
        for poly in polygons:
            f.write("f " + " ".join(str(int(v) + vertex_base) for v in poly) + "\n")
        vertex_base += len(verts)


def write_obj_stream(hxa: HxaFile, f: TextIO, scale: float = 1.0) -> int:
    """Write every geometry node of ``hxa`` to ``f``; returns the object count."""
    objects = _collect_objects(hxa, scale)
    _write_objects(objects, f)
    return len(objects)


def write_obj(hxa: HxaFile, path_obj: str, scale: float = 1.0) -> int:
    objects = _collect_objects(hxa, scale)
    with open(path_obj, "w", encoding="utf-8") as f:
        f.write("# exported from HxA\n")
        _write_objects(objects, f)
    logger.info("wrote %d objects to %s", len(objects), path_obj)
    return len(objects)
