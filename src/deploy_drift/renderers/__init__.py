"""Renderers for drift output.

All renderers implement the BaseRenderer protocol and only know about
OutputDescriptor, never about drift findings directly.
"""

from .base import BaseRenderer
from .cli_renderer import CLIRenderer
from .json_renderer import JSONRenderer

__all__ = ["BaseRenderer", "CLIRenderer", "JSONRenderer"]
