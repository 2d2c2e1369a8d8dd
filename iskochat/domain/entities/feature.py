from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from iskochat.domain.exceptions import FeatureDisabledError


class FeatureState(str, Enum):
    enabled = "enabled"
    disabled = "disabled"


class Feature(str, Enum):
    auto_reply = "auto_reply"
    priority_ranking = "priority_ranking"
    # removed flows, replaced by the external auth provider
    custom_otp = "custom_otp"
    custom_registration = "custom_registration"
    complete_registration = "complete_registration"
    verify_reset_otp = "verify_reset_otp"
    delete_account = "delete_account"


# error code and message returned for a disabled feature
DISABLED_NOTICES: dict[Feature, tuple[str, str]] = {
    Feature.auto_reply: ("AUTO_REPLY_DISABLED", "Auto-reply is disabled."),
    Feature.priority_ranking: ("PRIORITY_RANKING_DISABLED", "Priority ranking signals are disabled."),
    Feature.custom_otp: (
        "CUSTOM_OTP_REMOVED",
        "Custom OTP endpoint removed; use the auth provider's built-in OTP sign-in instead.",
    ),
    Feature.custom_registration: (
        "CUSTOM_REGISTRATION_REMOVED",
        "Custom registration endpoint removed; sign up through the auth provider instead.",
    ),
    Feature.complete_registration: (
        "COMPLETE_REGISTRATION_REMOVED",
        "Registration completion endpoint removed; profiles are created after auth provider sign-up.",
    ),
    Feature.verify_reset_otp: (
        "CUSTOM_RESET_OTP_REMOVED",
        "Custom reset OTP verification removed; use the auth provider's password recovery instead.",
    ),
    Feature.delete_account: (
        "DELETE_ACCOUNT_REMOVED",
        "Self-service account deletion is disabled.",
    ),
}

REMOVED_FEATURES = frozenset(
    {
        Feature.custom_otp,
        Feature.custom_registration,
        Feature.complete_registration,
        Feature.verify_reset_otp,
        Feature.delete_account,
    }
)


@dataclass(frozen=True)
class FeatureFlags:
    states: Mapping[Feature, FeatureState] = field(default_factory=dict)

    def state_of(self, feature: Feature) -> FeatureState:
        # removed flows have no code path left, so they stay disabled whatever the config says
        if feature in REMOVED_FEATURES:
            return FeatureState.disabled
        return self.states.get(feature, FeatureState.disabled)

    def is_enabled(self, feature: Feature) -> bool:
        return self.state_of(feature) is FeatureState.enabled

    def require(self, feature: Feature) -> None:
        if self.is_enabled(feature):
            return
        code, message = DISABLED_NOTICES[feature]
        raise FeatureDisabledError(feature.value, code, message)

    @staticmethod
    def from_switches(**switches: bool) -> "FeatureFlags":
        return FeatureFlags(
            states={
                Feature(name): FeatureState.enabled if on else FeatureState.disabled
                for name, on in switches.items()
            }
        )
