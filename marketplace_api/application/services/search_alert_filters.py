"""
Filter construction for matching saved search alerts against a listing.
"""
from shared.models.listing import Listing
from marketplace_api.application.interfaces.service_interfaces import CompareOperator


def build_search_alert_filters(listing: Listing) -> list[tuple]:
    """
    Build the AND-joined filter selecting the search alerts a listing satisfies.

    Four independent predicates, each applied only when the listing value is
    truthy (a price or age of 0 counts as unset):

    - category: alert.category == listing.category
    - gender: alert.gender == listing.gender
    - price: alert.min_price <= price <= alert.max_price
    - age overlap: alert.max_age >= listing.min_age and
      alert.min_age <= listing.max_age

    An empty list matches every alert.
    """
    filters: list[tuple] = []

    if listing.category:
        filters.append(("category", listing.category, CompareOperator.EQUAL.value))
    if listing.gender:
        filters.append(("gender", listing.gender, CompareOperator.EQUAL.value))

    if listing.price:
        price = float(listing.price)
        filters.append(("min_price", price, CompareOperator.LESS_THAN_OR_EQUAL.value))
        filters.append(("max_price", price, CompareOperator.GREATER_THAN_OR_EQUAL.value))

    if listing.min_age:
        filters.append(("max_age", int(listing.min_age), CompareOperator.GREATER_THAN_OR_EQUAL.value))
    if listing.max_age:
        filters.append(("min_age", int(listing.max_age), CompareOperator.LESS_THAN_OR_EQUAL.value))

    return filters
