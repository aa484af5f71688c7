"""Formatting utilities for output."""

from .gas_formatter import format_gas, format_percentage
from .collapsed_formatter import generate_text_summary, stacks_to_collapsed_format

__all__ = ["format_gas", "format_percentage", "generate_text_summary", "stacks_to_collapsed_format"]
