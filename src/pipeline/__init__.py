"""
Page pipeline orchestration and run driver.

- `process_pages`: sequential per-page normalize -> OCR -> extraction with
  per-page failure isolation
- `run_invoice_pipeline`: preflight, scratch workspace, decomposition, output
"""

from .errors import DecompositionError, PipelineFatalError, SetupError
from .orchestrator import RunContext, process_pages
from .runner import RunOptions, run_invoice_pipeline
from .workspace import scratch_workspace

__all__ = [
    "DecompositionError",
    "PipelineFatalError",
    "RunContext",
    "RunOptions",
    "SetupError",
    "process_pages",
    "run_invoice_pipeline",
    "scratch_workspace",
]
