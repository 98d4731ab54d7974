"""
FastAPI application exposing the validation engine.

This module provides REST API endpoints for:
- Country-aware validation (TIN, VAT, IBAN, postal code)
- Country-less identifier checks (ISBN, GTIN, GLN, ISIN, BIC, ...)
- Listing the countries a family has rules for
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException, status
from pydantic import BaseModel

from .. import __version__
from ..config import IdentifierFamily, IdCheckConfig, NormalizeOptions
from ..engine.dispatcher import Validator

logger = logging.getLogger(__name__)

# Pydantic models for API requests/responses
class ValidationRequest(BaseModel):
    """Request model for country-aware validation."""
    family: IdentifierFamily
    country: Optional[str] = None
    value: Optional[str] = None
    options: Optional[NormalizeOptions] = None
    allow_lower_case_country_code: Optional[bool] = None

class CheckRequest(BaseModel):
    """Request model for country-less checks."""
    value: Optional[str] = None
    options: Optional[NormalizeOptions] = None

class ValidationResponse(BaseModel):
    valid: bool

class CountriesResponse(BaseModel):
    family: IdentifierFamily
    countries: List[str]

# FastAPI app configuration
app = FastAPI(
    title="idcheck API",
    description="Identifier format and checksum validation",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Global configuration
idcheck_config = IdCheckConfig()
validator = Validator(idcheck_config.validator)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "idcheck API - identifier validation",
        "version": __version__,
        "docs": "/docs"
    }

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "idcheck-api"}

@app.post("/validate", response_model=ValidationResponse)
async def validate_identifier(request: ValidationRequest):
    """Validate a value for a family and country. Absent value or country passes."""
    if not request.country or not request.value:
        return ValidationResponse(valid=True)
    valid = validator.validate(
        request.family,
        request.country,
        request.value,
        options=request.options,
        allow_lower_case_country_code=request.allow_lower_case_country_code,
    )
    logger.debug("validate %s %s -> %s", request.family.value, request.country, valid)
    return ValidationResponse(valid=valid)

@app.post("/check/{kind}", response_model=ValidationResponse)
async def check_identifier(kind: str, request: CheckRequest):
    """Validate a country-less identifier."""
    if kind not in validator.kinds():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown identifier kind: {kind}"
        )
    if not request.value:
        return ValidationResponse(valid=True)
    return ValidationResponse(valid=validator.check(kind, request.value, options=request.options))

@app.get("/families/{family}/countries", response_model=CountriesResponse)
async def list_countries(family: IdentifierFamily):
    """Countries that have rules for a family."""
    return CountriesResponse(family=family, countries=validator.countries(family))
