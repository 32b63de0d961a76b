# -*- coding: utf-8 -*-
"""Shared colors and pen widths for the diagram graphics."""

BLOCK_FILL = "#ffffff"
BLOCK_BORDER = "#202020"
SELECTED_BORDER = "#1e78ff"
LOCATION_FILL = "#eef3fa"
BUSBAR_FILL = "#f4f4f4"
ROW_DIVIDER = "#a0a0a0"

ANCHOR_COLOR = "#d000d0"
ANCHOR_PENDING_FILL = "#ffe000"
ANCHOR_PENDING_BORDER = "#ff8c00"

CONNECTION_COLOR = "#303030"

BORDER_WIDTH = 2.0
CONNECTION_WIDTH = 2.0

# Screen pixels around a line that still count as a click on it.
LINE_HIT_TOLERANCE = 5.0

LABEL_FONT = "Segoe UI"
LABEL_POINT_SIZE = 10
