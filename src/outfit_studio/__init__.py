"""
Outfit Studio: swap the outfit in a photo with a generative image editor.
"""
from .config import load_config
from .workflow import CompareExportView, MediaValidator, WorkflowController

__all__ = ["load_config", "CompareExportView", "MediaValidator", "WorkflowController"]
