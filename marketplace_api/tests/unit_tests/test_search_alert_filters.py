from shared.models.listing import Listing
from marketplace_api.application.services.search_alert_filters import build_search_alert_filters


def _listing(**overrides) -> Listing:
    values = dict(
        listing_id="abc123",
        category="Yoga",
        title="Morning yoga",
        price=25.0,
        location="Riverside Park",
        description="Gentle flow",
        gender="Female",
        age_group="13-18",
    )
    values.update(overrides)
    return Listing(**values)


class TestBuildSearchAlertFilters:
    """
    Every predicate is optional and guarded by truthiness of the listing value:

    category -> category eq
    gender   -> gender eq
    price    -> min_price le price, max_price ge price
    min_age  -> max_age ge min_age
    max_age  -> min_age le max_age
    """

    def test_all_predicates(self):
        filters = build_search_alert_filters(_listing())

        assert filters == [
            ("category", "Yoga", "eq"),
            ("gender", "Female", "eq"),
            ("min_price", 25.0, "le"),
            ("max_price", 25.0, "ge"),
            ("max_age", 13, "ge"),
            ("min_age", 18, "le"),
        ]

    def test_category_only(self):
        listing = _listing(gender=None, price=0.0, age_group=None)

        assert build_search_alert_filters(listing) == [("category", "Yoga", "eq")]

    def test_zero_price_is_treated_as_unset(self):
        filters = build_search_alert_filters(_listing(price=0.0))

        fields = [f[0] for f in filters]
        assert "min_price" not in fields
        assert "max_price" not in fields

    def test_open_ended_age_group_only_bounds_from_below(self):
        listing = _listing(age_group="21+")

        age_filters = [f for f in build_search_alert_filters(listing) if f[0] in ("min_age", "max_age")]

        assert listing.min_age == 21
        assert listing.max_age is None
        assert age_filters == [("max_age", 21, "ge")]

    def test_price_is_compared_as_float(self):
        filters = build_search_alert_filters(_listing(price=30))

        price_values = [f[1] for f in filters if f[0] in ("min_price", "max_price")]
        assert all(isinstance(v, float) for v in price_values)

    def test_no_criteria_matches_everything(self):
        listing = _listing(category="", gender=None, price=0.0, age_group=None)

        assert build_search_alert_filters(listing) == []
