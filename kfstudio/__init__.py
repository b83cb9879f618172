"""Keyframe tracks, transform nodes, undoable actions, undo history and rectangle packing for a 2D animation editor."""

__version__ = "0.1.0"
__all__ = ["track", "transform", "actions", "undo", "rectpack"]