"""LLM judge transport: per-model circuit breaker, rate-limit retry, model chain."""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import litellm
from circuitbreaker import (  # pyright: ignore[reportUnknownVariableType]
    CircuitBreaker,
    CircuitBreakerError,
)
from litellm.exceptions import RateLimitError as LitellmRateLimitError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from knowledge_scorer.config import Settings
from knowledge_scorer.constants import (
    CB_LLM_FAILURE_THRESHOLD,
    CB_LLM_RECOVERY_TIMEOUT,
    JUDGE_MAX_OUTPUT_TOKENS,
    JUDGE_TEMPERATURE,
    RETRY_INITIAL_WAIT,
    RETRY_MAX_ATTEMPTS,
    RETRY_MAX_WAIT,
)
from knowledge_scorer.resilience.errors import (
    LLMUnavailableError,
    classify_judge_error,
)

logger = logging.getLogger(__name__)

# litellm stubs have partially unknown types, so use a typed alias
if TYPE_CHECKING:
    _acompletion: Callable[..., Coroutine[Any, Any, Any]]
else:
    _acompletion = litellm.acompletion


@dataclass(frozen=True)
class LLMCallResult:
    """Completion text plus token accounting."""

    content: str
    model: str
    input_tokens: int
    output_tokens: int


def _is_non_rate_limit_error(
    thrown_type: type, thrown_value: BaseException
) -> bool:
    """Rate limits are backpressure, not outages; keep them off the breaker."""
    return not issubclass(thrown_type, LitellmRateLimitError)


# One breaker per model so an outage at one provider leaves the
# fallback models callable.
_breaker_registry: dict[str, CircuitBreaker] = {}  # pyright: ignore[reportUnknownVariableType]


def _get_breaker(model: str) -> CircuitBreaker:  # pyright: ignore[reportUnknownParameterType]
    """Get or create a circuit breaker for the given model."""
    if model not in _breaker_registry:
        _breaker_registry[model] = CircuitBreaker(  # pyright: ignore[reportUnknownMemberType]
            failure_threshold=CB_LLM_FAILURE_THRESHOLD,
            recovery_timeout=CB_LLM_RECOVERY_TIMEOUT,
            expected_exception=_is_non_rate_limit_error,
            name=f"judge_{model}",
        )
    return _breaker_registry[model]


@retry(
    stop=stop_after_attempt(RETRY_MAX_ATTEMPTS),
    wait=wait_exponential_jitter(
        initial=RETRY_INITIAL_WAIT, max=RETRY_MAX_WAIT
    ),
    retry=retry_if_exception_type(LitellmRateLimitError),
    reraise=True,
)
async def guarded_llm_call(
    model: str,
    messages: list[dict[str, str]],
    timeout: int,
    *,
    json_mode: bool = True,
    temperature: float = JUDGE_TEMPERATURE,
    max_tokens: int = JUDGE_MAX_OUTPUT_TOKENS,
) -> LLMCallResult:
    """Circuit-breaker-protected completion with rate-limit retry.

    - Breaker opens after 5 consecutive non-rate-limit failures and
      recovers after 30s.
    - Rate-limit errors (429) are retried with jittered exponential
      backoff, up to 3 attempts.
    """
    breaker = _get_breaker(model)
    if breaker.opened:  # pyright: ignore[reportUnknownMemberType]
        raise CircuitBreakerError(breaker)  # pyright: ignore[reportUnknownArgumentType]
    with breaker:  # pyright: ignore[reportUnknownMemberType]
        kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "timeout": timeout,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        response: Any = await _acompletion(**kwargs)

    usage: Any = getattr(response, "usage", None)
    return LLMCallResult(
        content=str(response.choices[0].message.content or ""),
        model=model,
        input_tokens=int(getattr(usage, "prompt_tokens", 0) or 0),
        output_tokens=int(getattr(usage, "completion_tokens", 0) or 0),
    )


async def complete_json(
    messages: list[dict[str, str]],
    settings: Settings,
) -> LLMCallResult:
    """Try each model in the chain until one returns a completion.

    Raises LLMUnavailableError when every model fails or its circuit
    is open.
    """
    last_error: BaseException | None = None
    for model in settings.litellm_model_chain:
        try:
            return await guarded_llm_call(
                model, messages, settings.llm_timeout_seconds
            )
        except CircuitBreakerError as exc:
            logger.warning(
                "event=circuit_open model=%s component=judge", model
            )
            last_error = exc
        except Exception as exc:
            logger.warning(
                "event=judge_call_failed model=%s error_class=%s",
                model,
                classify_judge_error(exc),
                exc_info=True,
            )
            last_error = exc
    raise LLMUnavailableError(
        list(settings.litellm_model_chain), last_error
    )
