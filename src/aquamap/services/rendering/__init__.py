"""Map draw-list assembly."""

from .assembler import assemble, select_visible_destinations
from .controller import MapController

__all__ = ["assemble", "select_visible_destinations", "MapController"]
