# -*- coding: utf-8 -*-
"""Shared engine constants (logical units unless stated otherwise)."""

# Zoom limits and additive step per wheel notch / button press.
ZOOM_MIN = 0.1
ZOOM_MAX = 5.0
ZOOM_STEP = 0.1

# Fit-to-content padding, fraction of the content size added per side.
FIT_PADDING = 0.1

# Logical canvas frames (width, height).
LAYOUT_CANVAS_SIZE = (4000.0, 3000.0)
LOCATION_CANVAS_SIZE = (2000.0, 1500.0)

# Block drag snap and render-point snap.
BLOCK_GRID = 20.0
ROUTE_GRID = 20.0

# Anchor marker size (diameter) in canvas units.
ANCHOR_SIZE = 12.0
ANCHOR_OFFSET = ANCHOR_SIZE / 2.0

# Route points closer than this on one axis are treated as aligned.
ALIGN_TOLERANCE = 1.0

# Block geometry.
LOCATION_SIZE = 200.0
SUPPLY_DIAMETER = 150.0
ALTERNATOR_SIZE = 150.0
CONDUCTOR_WIDTH = 300.0
CONDUCTOR_HEIGHT = 100.0
LOAD_SIZE = 120.0

BUSBAR_WIDTH = 350.0
BUSBAR_NAME_HEIGHT = 35.0
BUSBAR_ROW_HEIGHT = 50.0
BUSBAR_PLUS_SIZE = 40.0
BUSBAR_PLUS_GAP = 5.0

TRANSFORMER_CIRCLE = 100.0
TRANSFORMER_OVERLAP = 30.0

EXTERNAL_BUSBAR_WIDTH = 140.0
EXTERNAL_BUSBAR_ROW_HEIGHT = 50.0
EXTERNAL_BUSBAR_ROWS = 8
