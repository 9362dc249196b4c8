from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel


class ExpansionRequest(BaseModel):
    paths: List[str] = []
    struct_name: Optional[str] = None
    property_name: Optional[str] = None
    method_name: Optional[str] = None
    strict_references: Optional[bool] = None
    allow_empty_bundle: Optional[bool] = None


class TextEditDTO(BaseModel):
    path: str
    start: Tuple[int, int]
    end: Tuple[int, int]
    replacement: str


class ConstructorReportDTO(BaseModel):
    path: str
    container: str
    method_name: str
    parameters: List[str] = []
    effect: str = "none"
    discardable: bool = False
    status: str = "added"


class ExpansionResponseDTO(BaseModel):
    edits: List[TextEditDTO] = []
    constructors: List[ConstructorReportDTO] = []
    warnings: List[str] = []
    errors: List[str] = []
