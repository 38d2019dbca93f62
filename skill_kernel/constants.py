"""
Skill Kernel - Tunable Constants

All magic numbers live here as module-level defaults.
Nothing in the kernel hard-codes these values inline.
"""

# --- Identity ---
TAXONOMY_ROOT_NAME: str = "Tech Skills"
SKILL_KEY_SEPARATOR: str = "::"

# --- Usage Scale ---
USAGE_SCALE_MIN: float = 0.15
USAGE_SCALE_MAX: float = 0.95
USAGE_SCALE_DEGENERATE: float = 0.6

# --- Geometry Weights ---
# Floor so the partitioner never receives a literal zero weight.
EPSILON_WEIGHT: float = 0.001

# --- Leaf Opacity ---
OPACITY_HIDDEN: float = 0.2
OPACITY_NO_SELECTION: float = 0.15
OPACITY_BASE: float = 0.25
OPACITY_RATIO_SPAN: float = 0.75
OPACITY_STATIC: float = 0.9
