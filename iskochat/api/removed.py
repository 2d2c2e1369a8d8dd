from fastapi import APIRouter, Depends

from iskochat.api.schemas import RemovedFeatureSchema
from iskochat.domain.entities.feature import Feature, FeatureFlags
from iskochat.wiring.dependencies import get_feature_flags


router = APIRouter()

# FeatureDisabledError is turned into this 410 body by the app-level handler in main.py
GONE = {410: {"model": RemovedFeatureSchema}}


@router.post("/api/send-otp", responses=GONE)
def send_otp(flags: FeatureFlags = Depends(get_feature_flags)) -> None:
    flags.require(Feature.custom_otp)


@router.post("/api/register", responses=GONE)
def register(flags: FeatureFlags = Depends(get_feature_flags)) -> None:
    flags.require(Feature.custom_registration)


@router.post("/api/complete-registration", responses=GONE)
def complete_registration(flags: FeatureFlags = Depends(get_feature_flags)) -> None:
    flags.require(Feature.complete_registration)


@router.post("/api/verify-reset-otp", responses=GONE)
def verify_reset_otp(flags: FeatureFlags = Depends(get_feature_flags)) -> None:
    flags.require(Feature.verify_reset_otp)


@router.post("/api/delete-account", responses=GONE)
def delete_account(flags: FeatureFlags = Depends(get_feature_flags)) -> None:
    flags.require(Feature.delete_account)
