"""
TSStructure Extraction API Routes.

Extracts the structural model of TypeScript source posted by clients.
Requires Python 3.11+.
"""

from pathlib import PurePosixPath
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from api.dependencies import get_parser
from structure.typescript_parser import TypeScriptParser
from utils.config import Settings, get_settings
from utils.logger import get_logger

router = APIRouter()
logger = get_logger("api.structure")


class StructureRequest(BaseModel):
    """Source file to extract."""

    content: str = Field(..., description="TypeScript source code")
    file_path: str = Field(
        default="module.ts",
        min_length=1,
        description="Path of the file; names the root module and selects the grammar",
    )


class DiagnosticResponse(BaseModel):
    """A non-fatal extraction problem."""

    severity: str
    message: str
    line: int | None = None
    column: int | None = None


class StructureResponse(BaseModel):
    """Response model for structure extraction."""

    module: dict[str, Any]
    diagnostics: list[DiagnosticResponse]
    parse_time_ms: float


@router.post("", response_model=StructureResponse)
def extract_structure(
    request: StructureRequest,
    parser: TypeScriptParser = Depends(get_parser),
    settings: Settings = Depends(get_settings),
) -> StructureResponse:
    """
    Extract modules, classes, properties, methods and imports from one file.

    Unresolvable base classes are reported as diagnostics, not errors.
    """
    file_path = PurePosixPath(request.file_path)
    if file_path.suffix not in settings.extractor.file_extensions:
        raise HTTPException(
            status_code=422,
            detail=f"Unsupported file extension: '{file_path.suffix}'",
        )

    content = request.content.encode("utf-8")
    if len(content) > settings.api.max_content_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Source exceeds {settings.api.max_content_bytes} bytes",
        )

    result = parser.parse_content(content, file_path)
    logger.debug(
        "structure_extracted",
        path=str(file_path),
        elements=len(result.module.children),
        diagnostics=len(result.diagnostics),
    )

    return StructureResponse(
        module=result.module.as_dict,
        diagnostics=[DiagnosticResponse(**d.as_dict) for d in result.diagnostics],
        parse_time_ms=result.parse_time_ms,
    )
