"""Modal terminal text editor."""
from modedit.editor.session import RenderState, Session

__all__ = ["RenderState", "Session"]
