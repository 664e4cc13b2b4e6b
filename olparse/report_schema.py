"""
JSON report models for the CLI.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    line: int
    column: int
    type: str = Field(..., description="Token type name, e.g. ID or LCURLY")
    content: str = ""


class Diagnostic(BaseModel):
    model_config = ConfigDict(extra="forbid")

    source: str
    start_line: int
    end_line: int
    column: int
    description: str
    help: Optional[str] = None
    code: List[str] = Field(default_factory=list)


class TokensReport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    source: str
    tokens: List[TokenRecord]
    diagnostics: List[Diagnostic] = Field(default_factory=list)


class KeywordsReport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    scopes: Dict[str, List[str]]


__all__ = ["TokenRecord", "Diagnostic", "TokensReport", "KeywordsReport"]
