"""Extraction and analysis pipeline for reelscope."""

from reelscope.pipeline.content_pipeline import ContentPipeline
from reelscope.pipeline.orchestrator import ExtractionOrchestrator
from reelscope.pipeline.strategy_chain import DEFAULT_CHAINS, StrategyRegistry

__all__ = ["DEFAULT_CHAINS", "ContentPipeline", "ExtractionOrchestrator", "StrategyRegistry"]
