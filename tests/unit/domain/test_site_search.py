"""
Unit tests for free-text site search.
"""
import pytest

from site_registry.domain.services.site_search import SiteSearchSpecification
from tests.factories import GridDetailsFactory, build_site


@pytest.fixture
def site():
    return build_site(
        id=2001,
        name="Tower A",
        address="Bole Road",
        capacity="High",
        tags=["backbone"],
        powerSources=["Grid"],
        powerSourceDetails={"grid": GridDetailsFactory()},
    )


class TestSiteSearchSpecification:
    """Test matching rules."""

    @pytest.mark.parametrize("query", ["tower", "BOLE", "high", "backbone", "grid", "2001", "  Tower A "])
    def test_matches(self, site, query):
        assert SiteSearchSpecification(query).is_satisfied_by(site)

    @pytest.mark.parametrize("query", ["tower b", "200", "generator", "maintenance"])
    def test_no_match(self, site, query):
        """Test ids match exactly, never by prefix."""
        assert not SiteSearchSpecification(query).is_satisfied_by(site)

    @pytest.mark.parametrize("query", ["", "   ", None])
    def test_blank_query_matches_all(self, site, query):
        assert SiteSearchSpecification(query).is_satisfied_by(site)

    def test_non_site_candidate(self):
        assert not SiteSearchSpecification("x").is_satisfied_by({"name": "x"})
