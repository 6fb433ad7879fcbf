from .line_tools import register_line_tools

__all__ = ["register_line_tools"]
