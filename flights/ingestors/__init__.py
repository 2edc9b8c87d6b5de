"""Data ingestors for the flights service."""

from .trace import AdsbExchangeTraceFetcher, TraceFetcher, parse_trace, trace_url

__all__ = ["AdsbExchangeTraceFetcher", "TraceFetcher", "parse_trace", "trace_url"]
