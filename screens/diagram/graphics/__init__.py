"""Graphics layer for the diagram screen.

Qt-heavy QGraphics* items and the view that forwards input to the
:class:`~screens.diagram.diagram_controller.DiagramController`.
"""

from .items import AnchorItem, BlockItem, ConnectionItem
from .view import DiagramView

__all__ = ("AnchorItem", "BlockItem", "ConnectionItem", "DiagramView")
