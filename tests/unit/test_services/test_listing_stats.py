"""Tests for listing statistics."""

from decimal import Decimal

import pytest

from protea.models.profile import Profile
from protea.services.listing_stats import compute_statistics
from tests.utils.factories import create_listing


@pytest.mark.unit
def test_statistics_over_sample(sample_listings):
    stats = compute_statistics(sample_listings)

    assert stats.total_properties == 5
    # "nego" has no numeric price and is left out of the price aggregates
    assert stats.total_value == 1_500_000_000 + 850_000_000 + 2_500_000_000 + 3_000_000_000
    assert stats.average_price == Decimal(7_850_000_000) / 4
    assert stats.by_property_type == {"Rumah": 3, "Kavling": 1, "Apartemen": 1}
    assert stats.by_transaction_type == {"Jual": 4, "Sewa": 1}


@pytest.mark.unit
def test_status_counts_and_owner_ranking():
    listings = [
        create_listing(id="1", user_id="a", owner="Ani", status="active"),
        create_listing(id="2", user_id="b", owner="Budi", status="pending"),
        create_listing(id="3", user_id="b", owner="Budi", status="active"),
        create_listing(id="4", user_id="b", owner="Budi", status="Pending"),
        create_listing(id="5", user_id="a", title="DELETED", status="active"),
    ]
    profiles = {"b": Profile(id="b", name="Budi Santoso", email="budi@x.id")}

    stats = compute_statistics(listings, profiles)

    assert stats.active_listings == 2
    assert stats.pending_listings == 2
    assert [o.owner_user_id for o in stats.owners] == ["b", "a"]
    budi = stats.owners[0]
    assert budi.name == "Budi Santoso"
    assert budi.email == "budi@x.id"
    assert (budi.total_listings, budi.active_listings, budi.pending_listings) == (3, 1, 2)
    assert stats.owners[1].name == "Ani"


@pytest.mark.unit
def test_statistics_of_nothing():
    stats = compute_statistics([])

    assert stats.total_properties == 0
    assert stats.average_price == Decimal(0)
    assert stats.owners == []
