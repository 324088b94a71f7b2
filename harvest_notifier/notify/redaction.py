"""
Secret redaction for outbound text.

Every exact occurrence of a configured secret (webhook URLs, extra
credentials) is replaced by a fixed placeholder before free-form text
leaves the process. The structured report attachment is not redacted: it
only holds report data.

Redaction is idempotent. A secret occurrence that overlaps a placeholder
(one inserted by an earlier pass, or already in the input) swallows that
placeholder, and the text is re-scanned until no secret is left. The one
thing that cannot be removed is a secret occurring inside a placeholder
itself (e.g. the secret "ACT" inside "[REDACTED]"); such occurrences are
left alone.

The placeholder must not overlap itself (no proper prefix equal to a
suffix). Each pass then either removes a character outside placeholders
or merges two placeholders, so re-scanning terminates.
"""

from typing import Iterable, List, Tuple
import logging

logger = logging.getLogger(__name__)

REDACTED_PLACEHOLDER = "[REDACTED]"


def _overlaps_itself(placeholder: str) -> bool:
    return any(placeholder[:i] == placeholder[-i:] for i in range(1, len(placeholder)))


class SecretRedactor:
    """
    Replaces configured secrets with REDACTED_PLACEHOLDER.

    Overlapping or adjacent secret occurrences collapse into a single
    placeholder. An empty secret set is a no-op.
    """

    def __init__(self, secrets: Iterable[str] = (), placeholder: str = REDACTED_PLACEHOLDER) -> None:
        if not placeholder:
            raise ValueError("placeholder must be non-empty")
        if _overlaps_itself(placeholder):
            raise ValueError(f"placeholder must not overlap itself: {placeholder!r}")
        self._placeholder = placeholder
        # longest first, duplicates and empty values dropped
        self._secrets = sorted({s for s in secrets if s}, key=len, reverse=True)  # type: List[str]

    @property
    def placeholder(self) -> str:
        return self._placeholder

    @property
    def secret_count(self) -> int:
        return len(self._secrets)

    def redact(self, text: str) -> str:
        if not self._secrets or not text:
            return text
        spans = self._covered_spans(text)
        while spans:
            text = self._replace_spans(text, spans)
            spans = self._covered_spans(text)
        return text

    def _replace_spans(self, text: str, spans: List[Tuple[int, int]]) -> str:
        parts = []  # type: List[str]
        cursor = 0
        for start, end in spans:
            parts.append(text[cursor:start])
            parts.append(self._placeholder)
            cursor = end
        parts.append(text[cursor:])
        return "".join(parts)

    def _placeholder_spans(self, text: str) -> List[Tuple[int, int]]:
        spans = []  # type: List[Tuple[int, int]]
        size = len(self._placeholder)
        start = text.find(self._placeholder)
        while start != -1:
            spans.append((start, start + size))
            start = text.find(self._placeholder, start + size)
        return spans

    def _covered_spans(self, text: str) -> List[Tuple[int, int]]:
        """
        Merged [start, end) ranges to replace: every secret occurrence not
        inside a single placeholder, plus each placeholder it overlaps.
        """
        placeholders = self._placeholder_spans(text)
        spans = []  # type: List[Tuple[int, int]]
        for secret in self._secrets:
            start = text.find(secret)
            while start != -1:
                end = start + len(secret)
                if not any(p_start <= start and end <= p_end for p_start, p_end in placeholders):
                    spans.append((start, end))
                start = text.find(secret, start + 1)

        if not spans:
            return []

        spans.extend(
            (p_start, p_end) for p_start, p_end in placeholders
            if any(p_start < end and start < p_end for start, end in spans)
        )
        spans.sort()
        merged = [spans[0]]
        for start, end in spans[1:]:
            last_start, last_end = merged[-1]
            if start <= last_end:
                merged[-1] = (last_start, max(last_end, end))
            else:
                merged.append((start, end))
        return merged


def redact(text: str, secrets: Iterable[str]) -> str:
    """Functional shortcut for one-off redaction."""
    return SecretRedactor(secrets).redact(text)


class RedactingFilter(logging.Filter):
    """Logging filter that scrubs secrets from formatted log messages."""

    def __init__(self, redactor: SecretRedactor) -> None:
        super().__init__()
        self._redactor = redactor

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self._redactor.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True


def install_redaction_filter(redactor: SecretRedactor) -> None:
    """Attach a RedactingFilter to every root handler (once)."""
    root = logging.getLogger()
    for handler in root.handlers:
        if any(isinstance(f, RedactingFilter) for f in handler.filters):
            continue
        handler.addFilter(RedactingFilter(redactor))


__all__ = [
    "REDACTED_PLACEHOLDER",
    "SecretRedactor",
    "redact",
    "RedactingFilter",
    "install_redaction_filter",
]
