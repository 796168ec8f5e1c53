"""Formula generation agent."""

from .orchestrator import (
    CompletionMode,
    FormulaAgent,
    FormulaPreview,
    FormulaResult,
    create_llm_client,
)
from .prompts import DEFAULT_PREVIEW_REQUEST, SYSTEM_PROMPT, compose_prompt, system_prompt

__all__ = [
    "CompletionMode",
    "FormulaAgent",
    "FormulaPreview",
    "FormulaResult",
    "create_llm_client",
    "DEFAULT_PREVIEW_REQUEST",
    "SYSTEM_PROMPT",
    "compose_prompt",
    "system_prompt",
]
