"""Layer and metadata names HxA tools agree on.

The reader never checks any of these; consumers such as ``libhxa.mesh``
look layers up by them.
"""

from .model import ElementType

# Hard conventions

BASE_VERTEX_LAYER_NAME = "vertex"
BASE_VERTEX_LAYER_ID = 0
BASE_VERTEX_LAYER_COMPONENTS = 3
BASE_CORNER_LAYER_NAME = "reference"
BASE_CORNER_LAYER_ID = 0
BASE_CORNER_LAYER_COMPONENTS = 1
BASE_CORNER_LAYER_TYPE = ElementType.INT32
EDGE_NEIGHBOUR_LAYER_NAME = "neighbour"
EDGE_NEIGHBOUR_LAYER_TYPE = ElementType.INT32

# Soft conventions

LAYER_SEQUENCE0 = "sequence"
LAYER_NAME_UV0 = "uv"
LAYER_NORMALS = "normal"
LAYER_BINORMAL = "binormal"
LAYER_TANGENT = "tangent"
LAYER_COLOR = "color"
LAYER_CREASES = "creases"
LAYER_SELECTION = "select"
LAYER_SKIN_WEIGHT = "skining_weight"
LAYER_SKIN_REFERENCE = "skining_reference"
LAYER_BLENDSHAPE = "blendshape"
LAYER_ADD_BLENDSHAPE = "addblendshape"
LAYER_MATERIAL_ID = "material"

# Image layers

ALBEDO = "albedo"
LIGHT = "light"
DISPLACEMENT = "displacement"
DISTORTION = "distortion"
AMBIENT_OCCLUSION = "ambient_occlusion"

# Tag layers

NAME = "name"
TRANSFORM = "transform"
