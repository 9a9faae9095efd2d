"""bimexport - Intermediate Scene Model and streaming OBJ export for BIM scenes.

Format-specific readers populate a :class:`~bimexport.imf.Scene`; writers such as
:class:`~bimexport.obj.ObjWriter` consume it without knowing where it came from.
"""

from .imf import GlobalIdTable, PropertyDatabase, Scene
from .obj import ExportResult, ObjWriter, WriterOptions, export_scene

__version__ = "0.1.0"

__all__ = [
    "Scene",
    "PropertyDatabase",
    "GlobalIdTable",
    "ObjWriter",
    "WriterOptions",
    "ExportResult",
    "export_scene",
]
