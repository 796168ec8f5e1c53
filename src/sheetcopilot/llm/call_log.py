"""Recording of completion calls."""

import json
import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


@dataclass
class LLMCallRecord:
    """Record of a single completion call."""

    timestamp: str
    operation: str
    model: str
    provider: str
    input_tokens: int
    output_tokens: int
    total_tokens: int
    prompt_chars: int
    tools_included: bool
    duration_ms: float
    stop_reason: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


class LLMCallLogger:
    """Keeps this session's completion calls and optionally appends them to a JSONL file."""

    def __init__(self, log_path: Optional[Path] = None, enabled: bool = False):
        """Initialize the logger.

        Args:
            log_path: Path to the JSONL log file
            enabled: Whether records are written to the file
        """
        self.log_path = log_path
        self.enabled = enabled and log_path is not None
        self.session_calls: list[LLMCallRecord] = []

        if self.enabled:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def log_call(
        self,
        operation: str,
        model: str,
        provider: str,
        prompt_chars: int,
        tools_included: bool,
        duration_ms: float,
        stop_reason: str,
        usage: Optional[Dict[str, Any]] = None,
    ) -> LLMCallRecord:
        """Record a completion call.

        Args:
            operation: "generate_formula" or "tool_continuation"
            model: Model name used
            provider: Provider name (e.g., "openai", "anthropic")
            prompt_chars: Characters of system and user content sent
            tools_included: Whether tool declarations were sent
            duration_ms: Wall time of the call
            stop_reason: Normalised stop reason of the reply
            usage: Raw usage data from the API, if any

        Returns:
            The created LLMCallRecord
        """
        usage = usage or {}
        input_tokens = usage.get("input_tokens", 0)
        output_tokens = usage.get("output_tokens", 0)
        record = LLMCallRecord(
            timestamp=datetime.now(timezone.utc).isoformat(),
            operation=operation,
            model=model,
            provider=provider,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
            prompt_chars=prompt_chars,
            tools_included=tools_included,
            duration_ms=round(duration_ms, 1),
            stop_reason=stop_reason,
        )

        self.session_calls.append(record)
        logger.info(
            f"{operation}: {provider}/{model} {record.total_tokens} tokens "
            f"in {record.duration_ms}ms ({stop_reason})"
        )

        if self.enabled:
            self._write_to_log(record)

        return record

    def _write_to_log(self, record: LLMCallRecord):
        """Write a record to the log file."""
        try:
            with open(self.log_path, "a") as f:
                f.write(json.dumps(record.to_dict()) + "\n")
        except OSError as e:
            # A broken log file must not fail formula generation
            logger.warning(f"Failed to write to call log: {e}")

    def get_session_summary(self) -> Dict[str, Any]:
        """Totals for the current session."""
        return {
            "total_calls": len(self.session_calls),
            "total_input_tokens": sum(call.input_tokens for call in self.session_calls),
            "total_output_tokens": sum(call.output_tokens for call in self.session_calls),
            "total_tokens": sum(call.total_tokens for call in self.session_calls),
            "last_call": self.session_calls[-1].to_dict() if self.session_calls else None,
        }

    def reset_session(self):
        """Forget this session's records."""
        self.session_calls = []


def calculate_message_chars(messages: list[dict]) -> int:
    """Count characters of message content, tool payloads included."""
    total = 0
    for msg in messages:
        content = msg.get("content", "")
        if isinstance(content, str):
            total += len(content)
        else:
            total += len(json.dumps(content, default=str))
    return total
