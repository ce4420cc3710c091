"""Application layer - use cases and orchestration."""

from .assembler import GangsheetAssembler
from .dtos import (
    CreateGangsheetInput,
    DownloadOutput,
    ExtractionResult,
    GangsheetOutcome,
    GangsheetStatusOutput,
    PlacementOutcome,
    RollDownload,
)
from .factory import ServiceFactory

__all__ = [
    "CreateGangsheetInput",
    "DownloadOutput",
    "ExtractionResult",
    "GangsheetAssembler",
    "GangsheetOutcome",
    "GangsheetStatusOutput",
    "PlacementOutcome",
    "RollDownload",
    "ServiceFactory",
]
