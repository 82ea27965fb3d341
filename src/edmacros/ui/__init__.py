"""Text UI layer for edmacros."""

from .app import MacroInspectorApp
from .controller import InspectorController, InspectorSnapshot

__all__ = ["InspectorController", "InspectorSnapshot", "MacroInspectorApp"]
