"""Shared layout constants.

All canvas quantities are fractions of the full canvas (0..1).
"""

# Gap between an anchored inset and the canvas edge. 2% of the canvas
# matches the spatial JND for position discrimination, so an inset reads
# as "at the edge" without touching it.
INSET_MARGIN = 0.02

# Relative tolerance when deciding whether a literal width+height box
# distorts the inset's data aspect ratio.
ASPECT_TOLERANCE = 1e-9

# Default inset position when neither an anchor nor explicit coordinates
# are given.
DEFAULT_LOC = "right bottom"

# Scale factor substituted when an inset specifies no size at all.
DEFAULT_SCALE_FACTOR = 1.0
