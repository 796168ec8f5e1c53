"""API routes for SheetCopilot."""

from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, field_validator

from ..agent import (
    DEFAULT_PREVIEW_REQUEST,
    CompletionMode,
    FormulaAgent,
    FormulaPreview,
    FormulaResult,
)
from ..config import settings
from ..engine import analyze_selection
from ..errors import SheetCopilotError
from ..sheets import GoogleSheetsHost, SpreadsheetHost
from ..sheets.addressing import parse_range_notation

router = APIRouter()


class SelectionRequest(BaseModel):
    """A spreadsheet and the range the user selected."""

    spreadsheet_id: str
    range_notation: Optional[str] = None

    @field_validator("range_notation")
    @classmethod
    def validate_range_notation(cls, v: Optional[str]) -> Optional[str]:
        """Reject ranges that are not A1 notation."""
        if v:
            parse_range_notation(v)
        return v


class GenerateRequest(SelectionRequest):
    """Request to generate and insert a formula."""

    request: str
    mode: Optional[CompletionMode] = None


class PreviewRequest(SelectionRequest):
    """Request for the debug preview."""

    request: str = DEFAULT_PREVIEW_REQUEST


def build_host(selection: SelectionRequest) -> SpreadsheetHost:
    """Create the host for a request's selection."""
    return GoogleSheetsHost(selection.spreadsheet_id, selection.range_notation)


def build_agent(host: SpreadsheetHost, mode: Optional[CompletionMode] = None) -> FormulaAgent:
    """Create a formula agent for one action."""
    return FormulaAgent(host, mode=mode)


@router.post("/formula/generate", response_model=FormulaResult)
def generate_formula(request: GenerateRequest):
    """Generate a formula for the selection and insert it."""
    if not request.request.strip():
        raise HTTPException(status_code=400, detail="Request text is required")
    agent = build_agent(build_host(request), request.mode)
    return agent.generate_formula(request.request)


@router.post("/formula/preview", response_model=FormulaPreview)
def preview_formula(request: PreviewRequest):
    """Show the analysis and prompt that would be sent, without calling the model."""
    agent = build_agent(build_host(request))
    try:
        return agent.preview(request.request)
    except SheetCopilotError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/analysis")
def analyze(request: SelectionRequest):
    """Analyze the selection; errors come back as {"error": ...}."""
    return analyze_selection(build_host(request))


@router.get("/health")
def health_check():
    """Health check endpoint with non-secret configuration."""
    config = {
        "llm_provider": settings.llm_provider,
        "model_name": settings.model_name,
        "completion_mode": settings.completion_mode,
        "openai_key_present": bool(settings.openai_api_key),
        "openrouter_key_present": bool(settings.openrouter_api_key),
        "anthropic_key_present": bool(settings.anthropic_api_key),
        "google_credentials_configured": settings.google_credentials_path.exists(),
    }
    return {"status": "ok", "service": "sheetcopilot", "config": config}
