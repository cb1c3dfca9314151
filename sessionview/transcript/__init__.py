"""Transcript reconstruction from Claude Code session logs."""

from sessionview.transcript.aggregator import MessageAggregator
from sessionview.transcript.correlation import CorrelationTable, ToolSlot
from sessionview.transcript.decoder import decode_record
from sessionview.transcript.extractor import Counters, Extraction, extract_content
from sessionview.transcript.reconstruct import (
    ReconstructionStats,
    TranscriptReconstructor,
    reconstruct_lines,
    reconstruct_transcript,
)

__all__ = [
    "CorrelationTable",
    "Counters",
    "Extraction",
    "MessageAggregator",
    "ReconstructionStats",
    "ToolSlot",
    "TranscriptReconstructor",
    "decode_record",
    "extract_content",
    "reconstruct_lines",
    "reconstruct_transcript",
]
