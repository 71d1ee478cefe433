"""Settings, license and AI quota endpoints."""

from fastapi import APIRouter, Depends

from phe_diary.api.dependencies import get_container, require_user
from phe_diary.api.schemas import (
    ConsentIn,
    EstimateCheckIn,
    GettingStartedIn,
    LicenseValidateIn,
    ResetIn,
    SettingsUpdateIn,
    settings_out,
)
from phe_diary.containers import AppContainer
from phe_diary.domain.settings import LicenseTier
from phe_diary.errors import BadRequestError

router = APIRouter(prefix="/api", tags=["settings"])


@router.get("/settings")
def get_settings(
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    settings = container.settings_service.get_settings(user_id)
    return {"success": True, "settings": settings_out(settings)}


@router.post("/settings")
def update_settings(
    body: SettingsUpdateIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Write only the settings fields present in the request."""
    container.settings_service.update(user_id, body.model_dump(exclude_unset=True))
    return {"success": True}


@router.post("/settings/consent")
def record_consent(
    body: ConsentIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    container.settings_service.record_consent(
        user_id,
        health_data_consent=body.health_data_consent,
        email_consent=body.email_consent,
    )
    return {"success": True}


@router.post("/settings/getting-started")
def getting_started(
    body: GettingStartedIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    container.settings_service.set_getting_started(user_id, body.completed)
    return {"success": True}


@router.post("/settings/reset")
def reset_data(
    body: ResetIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    container.account_service.reset(user_id, body.type)
    return {"success": True, "type": str(body.type)}


@router.post("/settings/delete-account")
def delete_account(
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    container.account_service.delete_account(user_id)
    return {"success": True}


@router.post("/license/validate")
def validate_license(
    body: LicenseValidateIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Report which tier a license key unlocks without storing it."""
    if not body.license:
        raise BadRequestError("License key is required")
    tier = container.license_service.tier_for_key(body.license)
    return {
        "valid": tier.is_premium,
        "premium": tier.is_premium,
        "premiumAI": tier is LicenseTier.PREMIUM_AI,
    }


@router.post("/ai-estimates/check")
def check_estimate_quota(
    body: EstimateCheckIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Consume one AI estimate if today's credits allow it."""
    decision = container.estimate_service.check_and_consume(user_id, body.model)
    return {
        "success": True,
        "allowed": decision.allowed,
        "remaining": decision.remaining,
        "resetAt": decision.reset_at.isoformat(),
    }
