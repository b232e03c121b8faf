"""
Gemini Python SDK client for project narrative summaries.

Uses google-genai to turn the project header and KPIs into a short executive
summary. Includes exponential backoff for rate limit handling. Failures are
reported in the returned GeminiResponse, never raised.
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from google import genai

from xer_evm.config.settings import settings
from xer_evm.models import KPISet, ProjectModel

# Logger for retry messages
_logger = logging.getLogger(__name__)

# Retry configuration for rate limiting
RETRY_BASE_DELAY_SECONDS = 1.0
RETRY_MAX_DELAY_SECONDS = 60.0
RETRY_EXPONENTIAL_BASE = 2

# Error patterns that indicate rate limiting (should retry with backoff)
RETRYABLE_ERROR_PATTERNS = [
    "429",
    "resource_exhausted",
    "rate limit",
    "rate_limit",
    "quota exceeded",
    "quota_exceeded",
    "too many requests",
    "overloaded",
    "temporarily unavailable",
    "503",
    "500",
    "internal error",
]

SUMMARY_UNAVAILABLE = "Executive summary not available."

SUMMARY_PROMPT = """
You are a senior project controls manager.
Write a concise executive summary (max 200 words) for a construction project status report.

Project:
- Name: {name}
- ID: {id}
- Start: {start}
- Finish: {finish}
- Status: {status}

Key Metrics:
- Planned Value (PV): {pv}
- Earned Value (EV): {ev}
- Actual Cost (AC): {ac}
- SPI: {spi}
- CPI: {cpi}
- Schedule Variance (SV): {sv}
- Cost Variance (CV): {cv}
- EAC: {eac}
- VAC: {vac}
- Health: {health}

Write 1-2 short paragraphs in neutral business English, focusing on schedule, cost, risks, and recommended actions.
Do NOT include bullet points or headings.
"""

T = TypeVar('T')


def _is_retryable_api_error(error: Exception) -> bool:
    """
    Check if an API error is retryable (rate limit, temporary failure, etc.).

    Args:
        error: The exception raised by the API call

    Returns:
        True if the error indicates a temporary/rate limit issue that should be retried
    """
    error_str = str(error).lower()
    return any(pattern in error_str for pattern in RETRYABLE_ERROR_PATTERNS)


def _calculate_backoff_delay(attempt: int) -> float:
    """
    Calculate exponential backoff delay with jitter.

    Args:
        attempt: Current attempt number (0-indexed)

    Returns:
        Delay in seconds before next retry
    """
    # Exponential backoff: base * 2^attempt
    delay = RETRY_BASE_DELAY_SECONDS * (RETRY_EXPONENTIAL_BASE ** attempt)

    # Add jitter (random 0-25% of delay) to prevent thundering herd
    jitter = delay * random.uniform(0, 0.25)
    delay += jitter

    # Cap at maximum delay
    return min(delay, RETRY_MAX_DELAY_SECONDS)


def _call_with_retry(
    api_call: Callable[[], T],
    operation_name: str = "API call",
    max_attempts: Optional[int] = None,
) -> T:
    """
    Execute an API call with exponential backoff retry on rate limit errors.

    Args:
        api_call: A callable that makes the API request
        operation_name: Description of the operation for logging
        max_attempts: Attempts before giving up (default: settings.GEMINI_MAX_RETRIES)

    Returns:
        The result of the successful API call

    Raises:
        Exception: The last exception if all retries are exhausted
    """
    max_attempts = max(1, max_attempts or settings.GEMINI_MAX_RETRIES)

    for attempt in range(max_attempts):
        try:
            return api_call()
        except Exception as e:
            if not _is_retryable_api_error(e) or attempt == max_attempts - 1:
                if attempt > 0:
                    _logger.error(
                        f"Giving up on {operation_name} after {attempt + 1} attempts. "
                        f"Last error: {str(e)[:200]}"
                    )
                raise

            delay = _calculate_backoff_delay(attempt)
            _logger.warning(
                f"Rate limit hit on {operation_name} (attempt {attempt + 1}/{max_attempts}). "
                f"Retrying in {delay:.1f}s. Error: {str(e)[:100]}"
            )
            time.sleep(delay)

    raise RuntimeError(f"{operation_name} was not attempted")


@dataclass
class GeminiResponse:
    """Response from Gemini API."""
    success: bool
    result: Optional[Any]
    error: Optional[str]
    model: str
    usage: Optional[dict] = None


def _get_client() -> genai.Client:
    """Get authenticated Gemini client."""
    api_key = settings.GEMINI_API_KEY
    if not api_key:
        raise ValueError("No API key found. Set GEMINI_API_KEY or GOOGLE_API_KEY in .env")
    return genai.Client(api_key=api_key)


def build_summary_prompt(project: ProjectModel, kpis: KPISet) -> str:
    """
    Build the executive-summary prompt from project info and KPIs.

    Args:
        project: Parsed project
        kpis: Output of compute_kpis

    Returns:
        Prompt text
    """
    header = project.project
    return SUMMARY_PROMPT.format(
        name=header.name or 'N/A',
        id=header.id or 'N/A',
        start=header.start_date or 'N/A',
        finish=header.end_date or 'N/A',
        status=header.status or 'N/A',
        pv=kpis.total_planned_value,
        ev=kpis.total_earned_value,
        ac=kpis.total_actual_cost,
        spi=kpis.schedule_performance_index,
        cpi=kpis.cost_performance_index,
        sv=kpis.schedule_variance,
        cv=kpis.cost_variance,
        eac=kpis.estimate_at_completion,
        vac=kpis.variance_at_completion,
        health=kpis.health,
    )


def generate_project_summary(
    project: ProjectModel,
    kpis: KPISet,
    model: Optional[str] = None,
) -> GeminiResponse:
    """
    Generate a narrative executive summary for the project.

    Args:
        project: Parsed project
        kpis: Output of compute_kpis
        model: Gemini model to use (default: settings.GEMINI_MODEL)

    Returns:
        GeminiResponse whose result is the summary text
    """
    model = model or settings.GEMINI_MODEL

    try:
        client = _get_client()
    except ValueError as e:
        return GeminiResponse(
            success=False,
            result=None,
            error=str(e),
            model=model,
        )
    except Exception as e:
        return GeminiResponse(
            success=False,
            result=None,
            error=f"Failed to initialize Gemini client: {e}",
            model=model,
        )

    prompt = build_summary_prompt(project, kpis)

    try:
        response = _call_with_retry(
            lambda: client.models.generate_content(model=model, contents=prompt),
            operation_name="generate project summary",
        )
    except Exception as e:
        _logger.error(f"Gemini summary error: {e}")
        return GeminiResponse(
            success=False,
            result=None,
            error=str(e),
            model=model,
        )

    # Extract usage metadata if available
    usage = None
    if getattr(response, 'usage_metadata', None) is not None:
        usage = {
            "prompt_tokens": getattr(response.usage_metadata, 'prompt_token_count', None),
            "output_tokens": getattr(response.usage_metadata, 'candidates_token_count', None),
        }

    return GeminiResponse(
        success=True,
        result=response.text or SUMMARY_UNAVAILABLE,
        error=None,
        model=model,
        usage=usage,
    )


def summary_text(response: GeminiResponse) -> str:
    """Summary text of a response, or an empty string when it failed."""
    if not response.success or not response.result:
        return ""
    return str(response.result)
