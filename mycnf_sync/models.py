from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class VariableDefinitionResponse(BaseModel):
    name: str
    type: str


class ReconcileRequest(BaseModel):
    desired: Dict[str, Optional[str]] = Field(default_factory=dict)
    observed: Dict[str, str] = Field(default_factory=dict)
    normalize_keys: bool = True


class VariableChange(BaseModel):
    name: str
    type: str
    desired: str
    observed: str
    value: str


class SkippedItem(BaseModel):
    name: str
    issue: str
    value: Optional[str] = None
    action: str


class ReconcileSummary(BaseModel):
    examined: int = 0
    changed: int = 0
    unchanged: int = 0
    skipped: int = 0


class ReconcileReport(BaseModel):
    summary: ReconcileSummary
    skipped: List[SkippedItem] = Field(default_factory=list)
    option_file: Optional[Dict[str, Any]] = None


class ReconcileResponse(BaseModel):
    changes: List[VariableChange] = Field(default_factory=list)
    statements: List[str] = Field(default_factory=list)
    report: ReconcileReport


class HealthResponse(BaseModel):
    ok: bool = True
