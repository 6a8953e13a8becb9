"""
Tagged results and the collaborator response schemas.

Collaborator payloads are validated here before any field is read;
everything downstream only sees Ok(value) or Err(reason).
"""
import re
from typing import Any, Generic, List, Literal, Optional, TypeVar, Union
from pydantic import BaseModel

NO_EQUATIONS_SENTINEL = "No equations found"

T = TypeVar("T")


class Ok(BaseModel, Generic[T]):
    ok: Literal[True] = True
    value: T


class Err(BaseModel):
    ok: Literal[False] = False
    reason: str


Result = Union[Ok[Any], Err]


class AnalysisResponse(BaseModel):
    success: bool
    analysis: Optional[str] = None
    error: Optional[str] = None


class EquationResponse(BaseModel):
    success: bool
    equations: Optional[str] = None
    error: Optional[str] = None


class GraphResponse(BaseModel):
    success: bool = False
    geogebraEquation: Optional[str] = None
    error: Optional[str] = None


_BULLET = re.compile(r"^[-*•]\s*")


def parse_equations(text: Optional[str]) -> List[str]:
    """
    Split newline-delimited equations. Blank lines, bullet markers and the
    "No equations found" sentinel are dropped.
    """
    if not text:
        return []
    equations = []
    for line in text.splitlines():
        eq = _BULLET.sub("", line.strip()).strip()
        if not eq or eq == NO_EQUATIONS_SENTINEL:
            continue
        equations.append(eq)
    return equations
