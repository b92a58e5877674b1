"""Shared modules for the AI client layer.

Configuration loading, logging, error classification, data types and
console output helpers.
"""

__all__ = [
    "config_loader",
    "error_handler",
    "logger",
    "types",
    "user_prompts",
]
