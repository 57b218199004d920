"""Outcome of a bot-mitigation check."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CaptchaVerdict(str, Enum):
    PASSED = "passed"
    REJECTED = "rejected"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True, slots=True)
class CaptchaOutcome:
    """Verdict of the provider plus the diagnostics worth logging.

    UNAVAILABLE means the provider could not give an answer (network error,
    unexpected response); the caller's fail-open policy decides what it means.
    """

    verdict: CaptchaVerdict
    score: Optional[float] = None
    error_codes: tuple = ()

    @property
    def passed(self) -> bool:
        return self.verdict is CaptchaVerdict.PASSED

    @classmethod
    def unavailable(cls) -> "CaptchaOutcome":
        return cls(CaptchaVerdict.UNAVAILABLE)
