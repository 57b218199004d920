"""Form submission validation.

Normalises and validates inbound field values before they reach persistence or
notification logic. Malformed input is an expected outcome: it is reported in
the returned ``ValidatedSubmission`` and never raised.

Per field, in rule-declaration order:

1. required and blank after trimming: error, remaining checks skipped
2. optional and blank: valid and empty
3. length bounds on the trimmed value
4. ``pattern`` as a full-string match
5. ``sanitize``: HTML-significant characters replaced by entities

Only the first failing check of a field is reported.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Pattern, Union

import structlog

logger = structlog.get_logger(__name__)

_MARKUP_ESCAPES = str.maketrans({
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
})


def escape_markup(value: str) -> str:
    """Neutralise markup so the value is inert in HTML, e-mails and spreadsheets."""
    return value.translate(_MARKUP_ESCAPES)


@dataclass(frozen=True)
class FieldRule:
    """Validation rule for one form field.

    Attributes:
        required: Field must be present and non-blank
        min_length: Minimum length of the trimmed value
        max_length: Maximum length of the trimmed value
        pattern: Regex the whole trimmed value must match
        sanitize: Escape markup in the cleaned value
        label: Human-readable field name used in default messages
        messages: Per-check overrides keyed by ``required``, ``min_length``,
            ``max_length`` or ``pattern``
    """

    required: bool = False
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[Union[str, Pattern[str]]] = None
    sanitize: bool = False
    label: Optional[str] = None
    messages: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.pattern, str):
            object.__setattr__(self, "pattern", re.compile(self.pattern))
        if self.min_length is not None and self.max_length is not None and self.min_length > self.max_length:
            raise ValueError("min_length cannot exceed max_length")

    def message_for(self, check: str, name: str) -> str:
        if check in self.messages:
            return self.messages[check]
        label = self.label or name
        if check == "required":
            return f"{label} is required"
        if check == "min_length":
            return f"{label} must be at least {self.min_length} characters"
        if check == "max_length":
            return f"{label} must be no more than {self.max_length} characters"
        return f"{label} is invalid"


@dataclass(frozen=True)
class ValidatedSubmission:
    """Result of validating one submission.

    ``valid`` is True exactly when ``field_errors`` is empty. ``cleaned`` holds
    the trimmed (and, where requested, sanitised) value of every ruled field;
    blank optional fields map to an empty string.
    """

    cleaned: Dict[str, str]
    field_errors: Dict[str, str]

    @property
    def valid(self) -> bool:
        return not self.field_errors

    def get(self, name: str, default: str = "") -> str:
        return self.cleaned.get(name, default)


class SubmissionValidator:
    """Applies ``FieldRule`` mappings to raw form fields."""

    def validate(self, raw_fields: Mapping[str, Any], rules: Mapping[str, FieldRule]) -> ValidatedSubmission:
        cleaned: Dict[str, str] = {}
        field_errors: Dict[str, str] = {}

        for name, rule in rules.items():
            value = self._coerce(raw_fields.get(name))

            if not value:
                if rule.required:
                    field_errors[name] = rule.message_for("required", name)
                else:
                    cleaned[name] = ""
                continue

            error = self._check(name, value, rule)
            if error:
                field_errors[name] = error
                continue

            cleaned[name] = escape_markup(value) if rule.sanitize else value

        if field_errors:
            logger.debug("submission_invalid", fields=sorted(field_errors))

        return ValidatedSubmission(cleaned=cleaned, field_errors=field_errors)

    @staticmethod
    def _coerce(raw: Any) -> str:
        if raw is None:
            return ""
        if not isinstance(raw, str):
            raw = str(raw)
        return raw.strip()

    @staticmethod
    def _check(name: str, value: str, rule: FieldRule) -> Optional[str]:
        if rule.min_length is not None and len(value) < rule.min_length:
            return rule.message_for("min_length", name)
        if rule.max_length is not None and len(value) > rule.max_length:
            return rule.message_for("max_length", name)
        if rule.pattern is not None and not rule.pattern.fullmatch(value):
            return rule.message_for("pattern", name)
        return None


submission_validator = SubmissionValidator()
