# fxdesk/models/__init__.py

from fxdesk.models.enums import Direction, PositionStatus
from fxdesk.models.position import Position

__all__ = ["Direction", "PositionStatus", "Position"]
