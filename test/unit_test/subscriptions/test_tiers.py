import pytest

from booktalks_buddy.subscriptions import MembershipTier, is_premium, normalize_tier, tier_level, tier_satisfies


class TestNormalizeTier:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("privileged", MembershipTier.PRIVILEGED),
            ("PRIVILEGED", MembershipTier.PRIVILEGED),
            ("privileged_plus", MembershipTier.PRIVILEGED_PLUS),
            (" Privileged_Plus ", MembershipTier.PRIVILEGED_PLUS),
            ("member", MembershipTier.MEMBER),
        ],
    )
    def test_known_values(self, value, expected):
        assert normalize_tier(value) == expected

    @pytest.mark.parametrize("value", [None, "", "gold", "premium"])
    def test_unknown_values_fall_back_to_member(self, value):
        assert normalize_tier(value) == MembershipTier.MEMBER

    def test_enum_passes_through(self):
        assert normalize_tier(MembershipTier.PRIVILEGED_PLUS) is MembershipTier.PRIVILEGED_PLUS


class TestTierOrdering:
    def test_levels_are_strictly_increasing(self):
        assert tier_level("member") < tier_level("privileged") < tier_level("privileged_plus")

    def test_higher_tier_satisfies_lower_requirement(self):
        assert tier_satisfies(MembershipTier.PRIVILEGED_PLUS, MembershipTier.PRIVILEGED)
        assert tier_satisfies("privileged", MembershipTier.PRIVILEGED)

    def test_lower_tier_does_not_satisfy_higher_requirement(self):
        assert not tier_satisfies(MembershipTier.MEMBER, MembershipTier.PRIVILEGED)
        assert not tier_satisfies(None, MembershipTier.PRIVILEGED)

    def test_is_premium(self):
        assert not is_premium(MembershipTier.MEMBER)
        assert is_premium("privileged")
        assert is_premium(MembershipTier.PRIVILEGED_PLUS)
