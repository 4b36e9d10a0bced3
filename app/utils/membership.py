from app.core.exceptions import InvalidMembershipPoints
from app.models.enums import MembershipTier

# Inclusive lower bounds, highest first
TIER_THRESHOLDS = (
    (750, MembershipTier.DIAMOND),
    (500, MembershipTier.PLATINUM),
    (250, MembershipTier.GOLD),
    (125, MembershipTier.SILVER),
    (50, MembershipTier.BRONZE),
    (0, MembershipTier.NONE),
)


def resolve_tier(points: float) -> MembershipTier:
    if points < 0:
        raise InvalidMembershipPoints(f"Membership points cannot be negative (got {points}).")

    for threshold, tier in TIER_THRESHOLDS:
        if points >= threshold:
            return tier
