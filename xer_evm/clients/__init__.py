"""API clients for narrative summaries."""

from .gemini_client import (
    generate_project_summary,
    build_summary_prompt,
    summary_text,
    GeminiResponse,
)

__all__ = [
    "generate_project_summary",
    "build_summary_prompt",
    "summary_text",
    "GeminiResponse",
]
