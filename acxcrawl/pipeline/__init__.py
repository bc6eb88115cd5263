"""Crawl orchestration."""

from .orchestrator import PIPELINE_ORDER, PIPELINES, PipelineOrchestrator, PipelineStage

__all__ = ["PIPELINE_ORDER", "PIPELINES", "PipelineOrchestrator", "PipelineStage"]
