"""
Channel Pricing API Router

Endpoints for channel pricing: migration status and fix, legacy and unified
pricing edits, validation, and default pricing per adaptor type.
"""

import json
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..errors import PricingError, DecodeError, ValidationError, NotFoundError, StoreWriteError
from ..schemas.pricing import (
    LegacyPricingUpdate,
    ModelConfigsUpdate,
    ValidationResultResponse,
    MigrationStatusResponse,
    FixResponse,
    DisplayPriceTableResponse,
)
from ..services.config_normalizer import configs_to_document
from ..services.config_validator import parse_model_configs, validate
from ..services.default_pricing import defaults_for, legacy_defaults_for
from ..services.migration_classifier import MigrationReport, classify
from ..services.migration_reconciler import get_migration_reconciler
from ..services.price_units import PriceUnit, display_price_table
from ..services.pricing_store import ChannelPricing, PricingStore
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/channel", tags=["Channel Pricing"])


def _ok(data=None, message: str = "") -> dict:
    return {"success": True, "message": message, "data": data}


def _http_error(e: PricingError) -> HTTPException:
    """Map a pricing error onto the HTTP status the admin console expects"""
    if isinstance(e, (DecodeError, ValidationError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    if isinstance(e, StoreWriteError) and e.conflict:
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)


def _status_payload(pricing: ChannelPricing, report: MigrationReport) -> dict:
    return {
        "channel_id": pricing.channel_id,
        "channel_name": pricing.channel_name,
        "channel_type": pricing.channel_type,
        **report.to_dict(),
    }


# ==================
# Defaults & Validation
# ==================

@router.get("/default-pricing")
async def get_default_pricing(
    type: int = Query(..., description="Channel (adaptor) type"),
):
    """
    Default pricing for a channel type, used to pre-fill the pricing editor.

    All three documents are returned as JSON strings.
    """
    model_ratio, completion_ratio = legacy_defaults_for(type)
    return _ok({
        "model_ratio": json.dumps(model_ratio),
        "completion_ratio": json.dumps(completion_ratio),
        "model_configs": json.dumps(defaults_for(type)),
    })


@router.post("/model-configs/validate")
async def validate_model_configs(payload: ModelConfigsUpdate):
    """Check a unified document without saving it; a rejection is still a 200"""
    result = ValidationResultResponse(**validate(payload.model_configs).to_dict())
    message = "" if result.valid else result.error
    return _ok(result.model_dump(), message=message)


# ==================
# Bulk Migration
# ==================

@router.get("/migration-summary")
async def get_migration_summary(db: Session = Depends(get_db)):
    """Number of channels in each migration status"""
    return _ok(get_migration_reconciler(db).summary())


@router.post("/fix-all")
async def fix_all_channels(db: Session = Depends(get_db)):
    """Reconcile every channel that still has legacy pricing"""
    result = get_migration_reconciler(db).fix_all()
    return _ok({
        "checked": result.checked,
        "fixed": result.fixed,
        "unchanged": result.unchanged,
        "failed": result.failed,
        "errors": result.errors,
    }, message=f"Reconciled {result.fixed} channels")


# ==================
# Per-channel Migration
# ==================

@router.get("/{channel_id}/migration-status")
async def get_migration_status(channel_id: int, db: Session = Depends(get_db)):
    """How far the channel's pricing has moved to unified model configs"""
    try:
        pricing = PricingStore(db).get(channel_id)
    except PricingError as e:
        raise _http_error(e)

    payload = _status_payload(pricing, classify(pricing))
    return _ok(MigrationStatusResponse(**payload).model_dump())


@router.post("/{channel_id}/fix")
async def fix_channel_pricing(channel_id: int, db: Session = Depends(get_db)):
    """
    Copy legacy-only models into the unified model configs.

    Models already in the unified map are never overwritten and legacy maps
    are kept. Calling this again changes nothing.
    """
    try:
        result = get_migration_reconciler(db).fix(channel_id)
    except PricingError as e:
        raise _http_error(e)

    payload = _status_payload(result.pricing, result.report)
    response = FixResponse(**payload, added_models=result.added_models, written=result.written)
    message = f"Added {len(result.added_models)} models" if result.written else "Nothing to migrate"
    return _ok(response.model_dump(), message=message)


@router.post("/{channel_id}/debug")
async def debug_channel_pricing(channel_id: int, db: Session = Depends(get_db)):
    """Write a diagnostic snapshot of the channel's pricing to the logs"""
    try:
        pricing = PricingStore(db).get(channel_id)
    except PricingError as e:
        raise _http_error(e)

    _log_channel_diagnostics(pricing)
    return {"success": True, "message": "Debug information logged. Check application logs for details."}


# ==================
# Legacy Pricing (backward-compatible editors)
# ==================

@router.get("/{channel_id}/pricing")
async def get_channel_pricing(channel_id: int, db: Session = Depends(get_db)):
    """Legacy flat maps exactly as stored"""
    try:
        pricing = PricingStore(db).get(channel_id)
    except PricingError as e:
        raise _http_error(e)

    return _ok({
        "model_ratio": pricing.legacy_model_ratio or {},
        "completion_ratio": pricing.legacy_completion_ratio or {},
    })


@router.put("/{channel_id}/pricing")
async def update_channel_pricing(
    channel_id: int,
    pricing_data: LegacyPricingUpdate,
    db: Session = Depends(get_db)
):
    """Replace both legacy flat maps; unified model configs are not touched"""
    try:
        pricing = PricingStore(db).write_legacy(
            channel_id,
            pricing_data.model_ratio,
            pricing_data.completion_ratio,
        )
    except PricingError as e:
        raise _http_error(e)

    return _ok({
        "model_ratio": pricing.legacy_model_ratio or {},
        "completion_ratio": pricing.legacy_completion_ratio or {},
    })


# ==================
# Unified Model Configs
# ==================

@router.get("/{channel_id}/model-configs")
async def get_model_configs(channel_id: int, db: Session = Depends(get_db)):
    try:
        pricing = PricingStore(db).get(channel_id)
    except PricingError as e:
        raise _http_error(e)

    return _ok({"model_configs": pricing.unified_document()})


@router.put("/{channel_id}/model-configs")
async def update_model_configs(
    channel_id: int,
    payload: ModelConfigsUpdate,
    db: Session = Depends(get_db)
):
    """
    Replace the unified model configs.

    The document is validated first; a rejected document leaves the stored
    pricing unchanged. A blank document clears the unified map.
    """
    try:
        configs = parse_model_configs(payload.model_configs)
    except (DecodeError, ValidationError) as e:
        logger.pricing_rejected(channel_id, e.message, getattr(e, "model_name", None))
        raise _http_error(e)

    try:
        pricing = PricingStore(db).write_unified(channel_id, configs)
    except PricingError as e:
        raise _http_error(e)

    return _ok({"model_configs": pricing.unified_document()})


@router.get("/display-prices/{channel_id}", response_model=DisplayPriceTableResponse)
async def get_display_prices(
    channel_id: int,
    unit: Optional[PriceUnit] = Query(None, description="per_million or per_thousand"),
    db: Session = Depends(get_db)
):
    """Unified model configs converted to display prices"""
    unit = unit or PriceUnit(settings.price_display_unit)
    try:
        pricing = PricingStore(db).get(channel_id)
    except PricingError as e:
        raise _http_error(e)

    return DisplayPriceTableResponse(
        channel_id=channel_id,
        unit=unit.value,
        rows=display_price_table(pricing.unified_model_configs, unit),
    )


# ==================
# Helpers
# ==================

def _log_channel_diagnostics(pricing: ChannelPricing):
    """Log the three pricing maps of a channel with its migration status"""
    report = classify(pricing)
    logger.log_with_context(
        logging.INFO,
        f"Channel {pricing.channel_id} pricing diagnostics: {report.status.value}",
        entity_type="channel",
        entity_id=str(pricing.channel_id),
        channel_name=pricing.channel_name,
        channel_type=pricing.channel_type,
        model_configs=configs_to_document(pricing.unified_model_configs),
        model_ratio=pricing.legacy_model_ratio or {},
        completion_ratio=pricing.legacy_completion_ratio or {},
    )
