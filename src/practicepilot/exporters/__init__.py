"""Exporters package — convert client reports to output formats."""
from practicepilot.exporters.markdown import render_markdown

__all__ = ["render_markdown"]
