"""
文字生成後端

GenerationClient 只負責送出一次 chat completion 並回傳文字；錯誤原樣往上拋。
重試另外由 RetryingGenerationClient 明確包裝。
"""

import logging
import random
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional, Tuple, Type

import openai

from .config import GenerationConfig

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS: Tuple[Type[BaseException], ...] = (
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.InternalServerError,
)


class GenerationClient(ABC):

    @abstractmethod
    def generate(self, system: str, user: str, config: GenerationConfig) -> str:
        pass


class OpenAIGenerationClient(GenerationClient):
    """OpenAI chat completions 封裝（非串流）."""

    def __init__(self, api_key: Optional[str] = None, client=None, base_url: Optional[str] = None):
        self.client = client or openai.OpenAI(api_key=api_key, base_url=base_url)

    def generate(self, system: str, user: str, config: GenerationConfig) -> str:
        logger.debug("Requesting completion from %s (temperature=%s)", config.model, config.temperature)
        response = self.client.chat.completions.create(
            model=config.model,
            temperature=config.temperature,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        )
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        return getattr(message, "content", None) or ""


def is_transient_error(exc: BaseException) -> bool:
    return isinstance(exc, TRANSIENT_ERRORS)


class RetryingGenerationClient(GenerationClient):
    """對暫時性錯誤（rate limit、timeout、連線、5xx）做指數退避重試；其他錯誤直接拋出."""

    def __init__(
        self,
        inner: GenerationClient,
        max_attempts: int = 3,
        base_delay: float = 0.8,
        max_delay: float = 8.0,
        is_retryable: Callable[[BaseException], bool] = is_transient_error,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.inner = inner
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.is_retryable = is_retryable
        self.sleep = sleep

    def generate(self, system: str, user: str, config: GenerationConfig) -> str:
        attempt = 1
        while True:
            try:
                return self.inner.generate(system, user, config)
            except Exception as exc:
                if attempt >= self.max_attempts or not self.is_retryable(exc):
                    raise
                delay = self._delay(attempt)
                logger.warning(
                    "Generation attempt %d/%d failed (%s), retrying in %.1fs",
                    attempt, self.max_attempts, exc, delay,
                )
                self.sleep(delay)
                attempt += 1

    def _delay(self, attempt: int) -> float:
        delay = min(self.max_delay, self.base_delay * (2 ** (attempt - 1)))
        delay *= 1.0 + random.uniform(-0.2, 0.2)
        return max(0.0, delay)
