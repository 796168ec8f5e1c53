"""Formula generation pipeline."""

import json
import logging
import time
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..config import Settings, settings
from ..engine import (
    DataAnalysis,
    FormulaInserter,
    analyze_snapshot,
    capture_selection,
    extract_formula,
    read_bounds,
    render_analysis_summary,
    resolve_target_cell,
)
from ..errors import (
    AuthenticationMissingError,
    ExtractionFailure,
    InsertionError,
    SheetCopilotError,
    UpstreamError,
)
from ..llm import (
    AnthropicClient,
    LLMCallLogger,
    LLMClient,
    LLMResponse,
    OpenAIClient,
    calculate_message_chars,
    tool_result_message,
)
from ..sheets.host import SpreadsheetHost
from ..sheets.models import GridSnapshot, format_cell
from ..tools import ToolContext, ToolRegistry, default_registry
from .prompts import DEFAULT_PREVIEW_REQUEST, compose_prompt, system_prompt

logger = logging.getLogger(__name__)


class CompletionMode(str, Enum):
    """Whether the selection tools are declared to the model."""

    PLAIN = "plain"
    TOOLS = "tools"


class FormulaResult(BaseModel):
    """Outcome of one generate-formula action."""

    success: bool
    formula: Optional[str] = None
    cell_address: Optional[str] = None
    inserted: bool = False
    explanation: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def failure(cls, error: SheetCopilotError, explanation: Optional[str] = None) -> "FormulaResult":
        return cls(success=False, error=str(error), error_code=error.code, explanation=explanation)


class FormulaPreview(BaseModel):
    """What would be sent for a request, without calling the model."""

    user_prompt: str
    data_analysis: DataAnalysis
    contextual_prompt: str
    target_cell: str
    sample_data: list[list[Any]] = Field(default_factory=list)
    summary: str = ""


def create_llm_client(config: Settings) -> LLMClient:
    """Create the appropriate LLM client based on configuration."""
    provider = config.llm_provider
    timeout = config.request_timeout_seconds
    if provider == "anthropic":
        if not config.anthropic_api_key:
            raise AuthenticationMissingError(provider, "ANTHROPIC_API_KEY")
        return AnthropicClient(api_key=config.anthropic_api_key, timeout=timeout)
    if provider == "openrouter":
        if not config.openrouter_api_key:
            raise AuthenticationMissingError(provider, "OPENROUTER_API_KEY")
        return OpenAIClient(
            api_key=config.openrouter_api_key,
            base_url=config.openrouter_base_url,
            timeout=timeout,
            provider="openrouter",
            extra_headers={"X-Title": "SheetCopilot"},
        )
    if provider == "openai":
        if not config.openai_api_key:
            raise AuthenticationMissingError(provider, "OPENAI_API_KEY")
        return OpenAIClient(
            api_key=config.openai_api_key,
            base_url=config.openai_base_url,
            timeout=timeout,
        )
    raise ValueError(f"Unknown LLM_PROVIDER: {provider}")


class FormulaAgent:
    """Turns a natural-language request into a formula written next to the selection."""

    def __init__(
        self,
        host: SpreadsheetHost,
        client: Optional[LLMClient] = None,
        config: Optional[Settings] = None,
        mode: Optional[CompletionMode] = None,
        registry: Optional[ToolRegistry] = None,
        call_logger: Optional[LLMCallLogger] = None,
    ):
        self.host = host
        self.config = config or settings
        self.mode = CompletionMode(mode or self.config.completion_mode)
        self.registry = registry or default_registry()
        self.inserter = FormulaInserter(host)
        self.call_logger = call_logger or LLMCallLogger(
            log_path=self.config.call_log_path,
            enabled=self.config.enable_call_logging,
        )
        # Created on first completion so previews work without credentials
        self._client = client

    @property
    def client(self) -> LLMClient:
        if self._client is None:
            self._client = create_llm_client(self.config)
        return self._client

    def preview(self, user_request: str = DEFAULT_PREVIEW_REQUEST) -> FormulaPreview:
        """Analysis, prompt and target cell for a request; no network call."""
        snapshot = capture_selection(self.host)
        analysis = analyze_snapshot(snapshot)
        target_cell = resolve_target_cell(snapshot, read_bounds(self.host, snapshot.sheet_name))
        return FormulaPreview(
            user_prompt=user_request,
            data_analysis=analysis,
            contextual_prompt=compose_prompt(
                user_request, analysis, snapshot, self.config.prompt_sample_rows
            ),
            target_cell=target_cell,
            sample_data=[[format_cell(cell) for cell in row] for row in snapshot.rows[:3]],
            summary=render_analysis_summary(analysis, target_cell),
        )

    def generate_formula(self, user_request: str) -> FormulaResult:
        """Run the whole pipeline for one user action."""
        try:
            snapshot = capture_selection(self.host)
            analysis = analyze_snapshot(snapshot)
            cell = resolve_target_cell(snapshot, read_bounds(self.host, snapshot.sheet_name))
            prompt = compose_prompt(user_request, analysis, snapshot, self.config.prompt_sample_rows)
            reply = self.complete(prompt, snapshot)
        except SheetCopilotError as e:
            logger.error(f"Formula generation failed ({e.code}): {e}")
            return FormulaResult.failure(e)

        if not reply:
            return FormulaResult.failure(UpstreamError("No response from AI"))

        formula = extract_formula(reply)
        if not formula:
            failure = ExtractionFailure(reply)
            logger.warning(f"{failure}: {reply[:200]!r}")
            return FormulaResult.failure(failure, explanation=reply)

        try:
            self.inserter.insert(snapshot.sheet_name, cell, formula)
        except InsertionError as e:
            return FormulaResult(
                success=True,
                formula=formula,
                cell_address=cell,
                inserted=False,
                explanation=reply,
                error=str(e),
                error_code=e.code,
            )

        return FormulaResult(
            success=True,
            formula=formula,
            cell_address=cell,
            inserted=True,
            explanation=reply,
        )

    def complete(self, prompt: str, snapshot: GridSnapshot) -> str:
        """Send the prompt and return the model's final text.

        In tool mode every tool call is answered from the registry and the
        model is asked again, for at most ``max_tool_rounds`` rounds.
        """
        with_tools = self.mode is CompletionMode.TOOLS
        tools = self.registry.to_anthropic_tools() if with_tools else []
        system = system_prompt(with_tools)
        context = ToolContext(snapshot=snapshot)
        messages: list[dict] = [{"role": "user", "content": prompt}]

        response = self._call(messages, system, tools, "generate_formula")
        rounds = 0
        while response.tool_calls and rounds < self.config.max_tool_rounds:
            messages.append({"role": "assistant", "content": response.content})
            messages.append(tool_result_message(self._execute_tools(response.tool_calls, context)))
            response = self._call(messages, system, tools, "tool_continuation")
            rounds += 1

        if response.tool_calls:
            logger.warning(f"Tool round limit ({self.config.max_tool_rounds}) reached")
        return response.text.strip()

    def _call(self, messages: list[dict], system: str, tools: list[dict], operation: str) -> LLMResponse:
        client = self.client
        model = self.config.model_name
        started = time.perf_counter()
        response = client.create_message(
            messages=messages,
            system=system,
            tools=tools,
            max_tokens=self.config.max_tokens,
            model=model,
            temperature=self.config.temperature,
        )
        self.call_logger.log_call(
            operation=operation,
            model=model,
            provider=client.provider,
            prompt_chars=calculate_message_chars(messages) + len(system),
            tools_included=bool(tools),
            duration_ms=(time.perf_counter() - started) * 1000,
            stop_reason=response.stop_reason,
            usage=response.usage,
        )
        return response

    def _execute_tools(self, tool_calls: list[dict], context: ToolContext) -> list[tuple[str, str]]:
        """Run each requested tool; failures go back to the model as errors."""
        results = []
        for call in tool_calls:
            name = call["name"]
            logger.info(f"Model called tool {name} with {call.get('input')}")
            try:
                result = self.registry.execute(name, context, **(call.get("input") or {}))
            except Exception as e:
                logger.warning(f"Tool {name} failed: {e}")
                result = {"error": str(e)}
            results.append((call["id"], json.dumps(result, default=str)))
        return results
