"""POST /api/normalize, /api/validate, /api/edit -- decode, check and re-encode documents."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from svgir.config import Settings
from svgir.dependencies import get_limits, get_settings
from svgir.document.issues import UNRESOLVED_REFERENCE, Issue
from svgir.errors import MalformedDocumentError, ResourceLimitExceeded
from svgir.models.requests import DocumentRequest, EditRequest, NormalizeRequest
from svgir.models.responses import EditResponse, IssueModel, NormalizeResponse, ValidateResponse
from svgir.svg.edit_applier import apply_edits
from svgir.svg.parser import DecodeLimits, DecodeResult, parse_svg
from svgir.svg.serializer import serialize_svg

router = APIRouter()
logger = logging.getLogger(__name__)


def _decode(svg: str, limits: DecodeLimits) -> DecodeResult:
    try:
        return parse_svg(svg, limits=limits)
    except ResourceLimitExceeded as e:
        logger.warning("Rejected document: %s", e)
        raise HTTPException(status_code=413, detail=str(e)) from e
    except MalformedDocumentError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def _issues(issues: list[Issue]) -> list[IssueModel]:
    return [IssueModel(**issue.to_dict()) for issue in issues]


@router.post("/normalize", response_model=NormalizeResponse)
async def normalize(
    req: NormalizeRequest,
    settings: Settings = Depends(get_settings),
    limits: DecodeLimits = Depends(get_limits),
) -> NormalizeResponse:
    result = _decode(req.svg, limits)
    precision = req.precision if req.precision is not None else settings.numeric_precision
    indent = req.indent if req.indent is not None else settings.indent
    return NormalizeResponse(
        svg=serialize_svg(result.document, precision=precision, indent=indent),
        node_count=result.document.node_count,
        issues=_issues(result.report.issues),
    )


@router.post("/validate", response_model=ValidateResponse)
async def validate(req: DocumentRequest, limits: DecodeLimits = Depends(get_limits)) -> ValidateResponse:
    result = _decode(req.svg, limits)
    # Decode already reported grammar and required-attribute problems; add reference checks.
    issues = list(result.report.issues)
    issues.extend(i for i in result.document.validate() if i.code == UNRESOLVED_REFERENCE)
    return ValidateResponse(valid=not issues, issues=_issues(issues))


@router.post("/edit", response_model=EditResponse)
async def edit(
    req: EditRequest,
    settings: Settings = Depends(get_settings),
    limits: DecodeLimits = Depends(get_limits),
) -> EditResponse:
    result = _decode(req.svg, limits)
    changes = apply_edits(result.document, req.operations, limits=limits)
    logger.info("Applied %d edit operations, %d changes", len(req.operations), len(changes))
    return EditResponse(
        svg=serialize_svg(result.document, precision=settings.numeric_precision, indent=settings.indent),
        changes=changes,
    )
