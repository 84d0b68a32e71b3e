"""libhxa: reader for the HxA 3D asset interchange format."""

from .errors import (
    HxaConventionError,
    HxaError,
    InternalError,
    InvalidMagicNumber,
    InvalidUtf8,
    TrailingData,
    UnexpectedElementType,
    UnexpectedEndOfData,
    UnexpectedImageKind,
    UnexpectedMetaKind,
    UnexpectedNodeKind,
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
from .reader import HXA_MAGIC, parse_hxa, read_hxa

__all__ = [
    "HXA_MAGIC",
    "parse_hxa",
    "read_hxa",
    "HxaFile",
    "HxaNode",
    "GeometryBody",
    "ImageBody",
    "LayerStack",
    "Layer",
    "MetaEntry",
    "NodeKind",
    "ElementType",
    "ImageKind",
    "MetaKind",
    "HxaError",
    "HxaConventionError",
    "InvalidMagicNumber",
    "UnexpectedEndOfData",
    "TrailingData",
    "UnexpectedNodeKind",
    "UnexpectedElementType",
    "UnexpectedImageKind",
    "UnexpectedMetaKind",
    "InvalidUtf8",
    "InternalError",
]
