"""
DevMind Backend — Provider Settings Route Handlers
====================================================

What:  Backs the "AI Provider Settings" screen.
       GET    /api/providers                  list registered vendors
       PUT    /api/providers/active           switch the active vendor
       PUT    /api/providers/{vendor_id}      register/replace a vendor key
       DELETE /api/providers/{vendor_id}      remove a vendor
       POST   /api/providers/{vendor_id}/validate  live credential probe

Selection is always explicit: registering a key never changes which vendor
is active, and removing the active vendor leaves none active until the user
picks one.
"""

import logging

from fastapi import APIRouter, Depends

from devmind.dependencies import get_registry
from devmind.exceptions import ValidationError
from devmind.providers.base import ProviderConfig, VendorId
from devmind.providers.factory import create_adapter
from devmind.providers.registry import ProviderRegistry
from devmind.schemas.ai import (
    ErrorResponse,
    ProviderInfo,
    ProviderKeyRequest,
    ProviderListResponse,
    ProviderValidationResponse,
    SetActiveProviderRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/providers", tags=["Providers"])


def _listing(registry: ProviderRegistry) -> ProviderListResponse:
    active = registry.active_vendor()
    return ProviderListResponse(
        active=active.value if active else None,
        providers=[ProviderInfo(**entry) for entry in registry.describe()],
    )


@router.get("", response_model=ProviderListResponse, summary="List configured AI providers")
async def list_providers(
    registry: ProviderRegistry = Depends(get_registry),
) -> ProviderListResponse:
    return _listing(registry)


@router.put(
    "/active",
    response_model=ProviderListResponse,
    responses={404: {"description": "Provider not configured", "model": ErrorResponse}},
    summary="Select the active AI provider",
)
async def set_active_provider(
    request: SetActiveProviderRequest,
    registry: ProviderRegistry = Depends(get_registry),
) -> ProviderListResponse:
    registry.set_active(request.vendor_id)
    return _listing(registry)


@router.put(
    "/{vendor_id}",
    response_model=ProviderListResponse,
    responses={400: {"description": "Unknown vendor or empty key", "model": ErrorResponse}},
    summary="Register or replace a provider API key",
)
async def register_provider(
    vendor_id: str,
    request: ProviderKeyRequest,
    registry: ProviderRegistry = Depends(get_registry),
) -> ProviderListResponse:
    """
    Build an adapter from a key entered in the settings screen.

    The key is passed straight into ProviderConfig (SecretStr) and is never
    logged or returned.
    """
    try:
        vendor = VendorId(vendor_id.lower())
    except ValueError:
        raise ValidationError(
            message=f"Unknown AI provider '{vendor_id}'",
            field="vendor_id",
            context={"allowed": [v.value for v in VendorId]},
        ) from None

    if not request.api_key.get_secret_value().strip():
        raise ValidationError(message="API key must not be empty", field="api_key")

    config = ProviderConfig(
        credential=request.api_key.get_secret_value().strip(),
        model_id=request.model,
        temperature=request.temperature,
        max_output_units=request.max_output_tokens,
    )
    registry.register(create_adapter(vendor, config))
    return _listing(registry)


@router.delete(
    "/{vendor_id}",
    response_model=ProviderListResponse,
    responses={404: {"description": "Provider not configured", "model": ErrorResponse}},
    summary="Remove a provider",
)
async def remove_provider(
    vendor_id: str,
    registry: ProviderRegistry = Depends(get_registry),
) -> ProviderListResponse:
    registry.unregister(vendor_id)
    return _listing(registry)


@router.post(
    "/{vendor_id}/validate",
    response_model=ProviderValidationResponse,
    summary="Check a provider's API key against the vendor",
)
async def validate_provider(
    vendor_id: str,
    registry: ProviderRegistry = Depends(get_registry),
) -> ProviderValidationResponse:
    """
    Live credential probe. Always HTTP 200: an unknown or unconfigured
    vendor is simply reported as valid=false.
    """
    valid = await registry.validate(vendor_id)
    return ProviderValidationResponse(vendor_id=vendor_id, valid=valid)
