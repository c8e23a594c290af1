"""Orchestrator - crawl and detection passes."""

from .crawl import CrawlRunner, CrawlSummary, SourceResult
from .detection import DetectionRunner, DetectionSummary
from .pipeline import build_email_sender, run_crawl, run_detection

__all__ = [
    "CrawlRunner",
    "CrawlSummary",
    "SourceResult",
    "DetectionRunner",
    "DetectionSummary",
    "build_email_sender",
    "run_crawl",
    "run_detection",
]
