"""
Rendering Layer

Format strategies are data; the Renderer is the only code that writes.
"""

from .formats import BBCODE, HTML, PLAIN_TEXT, FormatStrategy, LogOutputFormat, LogWriter
from .renderer import Renderer
from .sections import SECTIONS, Section

__all__ = [
    "BBCODE", "HTML", "PLAIN_TEXT", "FormatStrategy", "LogOutputFormat", "LogWriter",
    "Renderer", "SECTIONS", "Section",
]
