from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from .model import HxaFile, HxaNode, LayerStack
from .reader import read_hxa


# -----------------------------
# Flat, printable view of a decoded file
# -----------------------------

@dataclass
class LayerInfo:
    name: str
    components: int
    element_type: str
    elements: int


@dataclass
class StackInfo:
    name: str
    length: int
    layers: List[LayerInfo]


@dataclass
class NodeInfo:
    index: int
    kind: str
    metadata_count: int
    stacks: List[StackInfo]
    image_kind: Optional[str] = None
    resolution: Optional[Tuple[int, int, int]] = None


@dataclass
class HxaSummary:
    path: Optional[str]
    file_size: Optional[int]
    version: int
    nodes: List[NodeInfo]


def _stack_info(name: str, stack: LayerStack) -> StackInfo:
    return StackInfo(
        name=name,
        length=stack.length,
        layers=[
            LayerInfo(
                name=layer.name,
                components=layer.component_count,
                element_type=layer.element_type.name,
                elements=layer.element_count,
            )
            for layer in stack
        ],
    )


def _node_info(index: int, node: HxaNode) -> NodeInfo:
    info = NodeInfo(index=index, kind=node.kind.name, metadata_count=len(node.metadata), stacks=[])
    if node.geometry is not None:
        g = node.geometry
        info.stacks = [
            _stack_info("vertex", g.vertex_stack),
            _stack_info("corner", g.corner_stack),
            _stack_info("edge", g.edge_stack),
            _stack_info("face", g.face_stack),
        ]
    elif node.image is not None:
        img = node.image
        info.image_kind = img.image_kind.name
        info.resolution = tuple(img.resolution)
        info.stacks = [_stack_info("image", img.image_stack)]
    return info


def summarize_hxa(source: Union[str, HxaFile]) -> HxaSummary:
    path = None
    size = None
    if isinstance(source, HxaFile):
        hxa = source
    else:
        path = source
        size = os.path.getsize(path)
        hxa = read_hxa(path)

    return HxaSummary(
        path=path,
        file_size=size,
        version=hxa.version,
        nodes=[_node_info(i, node) for i, node in enumerate(hxa.nodes)],
    )
