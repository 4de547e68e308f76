"""
Upload validation, the transformation state machine, and compare/export.
"""
from .compare import CompareExportView, active_image
from .controller import WorkflowController
from .styles import CUSTOM_STYLE_ID, DEFAULT_STYLES, StyleCatalog, StylePreset
from .validator import IncomingFile, MediaValidator

__all__ = [
    "CUSTOM_STYLE_ID",
    "DEFAULT_STYLES",
    "CompareExportView",
    "IncomingFile",
    "MediaValidator",
    "StyleCatalog",
    "StylePreset",
    "WorkflowController",
    "active_image",
]
