"""
Pipeline package - application service layer between CLI and the stages.

Provides the GroupPipeline facade that orchestrates the workflow, centralizes
error mapping, and handles output formatting.
"""
from .facade import GroupPipeline, PipelineConfig, PipelineResult, HARDCODED_TAG_FILTER
from .mappers import exit_code_for, run_and_exit

__all__ = [
    "GroupPipeline",
    "PipelineConfig",
    "PipelineResult",
    "HARDCODED_TAG_FILTER",
    "exit_code_for",
    "run_and_exit",
]
