from .base import EngineRenderedPage, PdfRenderEngine
from .pypdfium2_engine import Pypdfium2Engine

__all__ = ["EngineRenderedPage", "PdfRenderEngine", "Pypdfium2Engine"]
