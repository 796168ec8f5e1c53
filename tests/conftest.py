"""Pytest configuration and shared fixtures."""

from pathlib import Path
from typing import Any, Optional

import pytest

from sheetcopilot.config import Settings
from sheetcopilot.llm import LLMCallLogger, LLMClient, LLMResponse
from sheetcopilot.sheets import GridSnapshot, SheetBounds, SpreadsheetHost


class InMemorySpreadsheet(SpreadsheetHost):
    """Spreadsheet host backed by a list of rows."""

    def __init__(
        self,
        values: Optional[list[list[Any]]],
        first_row: int = 1,
        first_column: int = 1,
        sheet_name: str = "Sheet1",
        max_rows: int = 1000,
        max_columns: int = 26,
        reject_writes: bool = False,
        selection_error: Optional[Exception] = None,
        bounds_error: Optional[Exception] = None,
    ):
        self.values = values
        self.first_row = first_row
        self.first_column = first_column
        self.sheet_name = sheet_name
        self.bounds = SheetBounds(max_rows=max_rows, max_columns=max_columns)
        self.reject_writes = reject_writes
        self.selection_error = selection_error
        self.bounds_error = bounds_error
        self.written: dict[str, str] = {}
        self.selection_reads = 0

    def get_selection(self) -> Optional[GridSnapshot]:
        self.selection_reads += 1
        if self.selection_error is not None:
            raise self.selection_error
        if self.values is None:
            return None
        return GridSnapshot.from_values(
            self.values,
            sheet_name=self.sheet_name,
            first_row=self.first_row,
            first_column=self.first_column,
        )

    def get_bounds(self, sheet_name: str) -> SheetBounds:
        if self.bounds_error is not None:
            raise self.bounds_error
        return self.bounds

    def set_formula(self, sheet_name: str, cell: str, formula: str) -> None:
        if self.reject_writes:
            raise PermissionError("You are trying to edit a protected cell")
        self.written[f"{sheet_name}!{cell}"] = formula


class ScriptedLLMClient(LLMClient):
    """LLM client that replays canned responses and records requests."""

    provider = "scripted"

    def __init__(self, responses: list):
        self.responses = list(responses)
        self.requests: list[dict] = []

    def create_message(self, messages, system, tools, max_tokens, model, temperature=0.1):
        self.requests.append(
            {
                "messages": [dict(m) for m in messages],
                "system": system,
                "tools": tools,
                "max_tokens": max_tokens,
                "model": model,
                "temperature": temperature,
            }
        )
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return text_response(response)
        return response


def text_response(text: str) -> LLMResponse:
    return LLMResponse(
        content=[{"type": "text", "text": text}],
        stop_reason="end_turn",
        usage={"input_tokens": 120, "output_tokens": 12},
    )


def tool_use_response(name: str, arguments: dict, call_id: str = "call_1") -> LLMResponse:
    return LLMResponse(
        content=[{"type": "tool_use", "id": call_id, "name": name, "input": arguments}],
        stop_reason="tool_use",
        usage={"input_tokens": 150, "output_tokens": 20},
    )


@pytest.fixture
def grocery_values() -> list[list[Any]]:
    """A 4x2 table with a header row."""
    return [
        ["Item", "Amount"],
        ["Apples", 10],
        ["Bread", 5],
        ["Milk", 3],
    ]


@pytest.fixture
def grocery_host(grocery_values) -> InMemorySpreadsheet:
    return InMemorySpreadsheet(grocery_values)


@pytest.fixture
def grocery_snapshot(grocery_values) -> GridSnapshot:
    return GridSnapshot.from_values(grocery_values)


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings with deterministic test values."""
    return Settings(
        llm_provider="openai",
        openai_api_key="sk-test-123",
        model_name="gpt-4o-mini",
        temperature=0.1,
        max_tokens=500,
        completion_mode="plain",
        max_tool_rounds=3,
        prompt_sample_rows=3,
        enable_call_logging=False,
        call_log_path=tmp_path / "calls.jsonl",
    )


@pytest.fixture
def call_logger() -> LLMCallLogger:
    return LLMCallLogger(enabled=False)
