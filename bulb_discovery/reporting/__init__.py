"""Reporting module - JSON discovery reports."""

from .json_reporter import JsonReporter

__all__ = ["JsonReporter"]
