"""Global configuration: element defaults, scanner thresholds, annotation names."""

# Separator between a region id and the ids of the elements it contains
NAMESPACE_SEPARATOR = "/"

# Origin conventions for regions
ORIGIN_CORNER = "corner"
ORIGIN_CENTER = "center"
ORIGIN_FLOOR_CENTER = "floor-center"
VALID_ORIGINS = (ORIGIN_CORNER, ORIGIN_CENTER, ORIGIN_FLOOR_CENTER)

# Collection name -> default element kind, in build order
COLLECTION_KINDS: dict[str, str | None] = {
    "walls": "wall",
    "floors": "floor",
    "platforms": "platform",
    "boxes": "platform",
    "cylinders": "cylinder",
    "spheres": "sphere",
    "wedges": "wedge",
    "elements": None,
}
DEFAULT_ELEMENT_KIND = "platform"

# Kind-specific geometry defaults (output units)
WALL_DEFAULT_HEIGHT = 10.0
WALL_DEFAULT_THICKNESS = 1.0
PLATFORM_DEFAULT_SIZE = (4.0, 1.0, 4.0)
FLOOR_DEFAULT_SIZE = (10.0, 10.0)
FLOOR_DEFAULT_THICKNESS = 1.0
CYLINDER_DEFAULT_HEIGHT = 4.0
CYLINDER_DEFAULT_RADIUS = 2.0
SPHERE_DEFAULT_RADIUS = 2.0
WEDGE_DEFAULT_SIZE = (4.0, 4.0, 4.0)

# Scanner heuristics
WALL_ASPECT_RATIO = 3.0
FLOOR_ASPECT_RATIO = 4.0
FLOOR_MAX_HEIGHT = 2.0
SNAP_THRESHOLD = 0.5

# Generated source
CODE_PRECISION = 2
INLINE_SEQUENCE_MAX = 4
DEFAULT_VAR_NAME = "map_definition"

# Mirror previews
MIRROR_SUFFIX = "_Mirror"
MIRROR_DEFAULT_GAP = 2.0

# Annotation (attribute) names written on and read from host parts
ATTR_ID = "layout_id"
ATTR_CLASS = "layout_class"
ATTR_SCALE = "layout_scale"
ATTR_KIND = "layout_kind"
ATTR_NAME = "layout_name"
ATTR_TAG = "layout_tag"
ATTR_AREA = "layout_area"
ATTR_BOUNDS = "layout_bounds"
ATTR_ORIGIN = "layout_origin"
ATTR_CORNER = "layout_corner"
ATTR_IGNORE = "layout_ignore"
AREA_TAG = "area"

# Host part defaults
DEFAULT_MATERIAL = "Plastic"
FALLBACK_MATERIAL = "SmoothPlastic"
DEFAULT_PART_COLOR = (163, 162, 165)

KNOWN_MATERIALS = (
    "Plastic",
    "SmoothPlastic",
    "Neon",
    "Wood",
    "WoodPlanks",
    "Marble",
    "Slate",
    "Concrete",
    "Granite",
    "Brick",
    "Pebble",
    "Cobblestone",
    "Metal",
    "CorrodedMetal",
    "DiamondPlate",
    "Foil",
    "Grass",
    "Ice",
    "Sand",
    "Fabric",
    "Glass",
    "ForceField",
)

# Named colors accepted in style sheets
NAMED_COLORS: dict[str, tuple[int, int, int]] = {
    "white": (242, 243, 243),
    "black": (27, 42, 53),
    "gray": (163, 162, 165),
    "dark gray": (99, 95, 98),
    "light gray": (229, 228, 223),
    "red": (196, 40, 28),
    "green": (40, 127, 71),
    "blue": (13, 105, 172),
    "yellow": (245, 205, 48),
    "orange": (218, 133, 65),
    "brown": (124, 92, 70),
    "beige": (215, 197, 154),
    "sand": (205, 184, 145),
}

# Generic host part names that never become element ids when scanning
GENERIC_PART_NAMES = (
    "Part",
    "WedgePart",
    "MeshPart",
    "UnionOperation",
    "Wall",
    "Floor",
    "Platform",
    "Box",
    "Wedge",
    "Ball",
    "Sphere",
    "Cylinder",
)
