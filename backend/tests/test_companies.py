"""
Tests for company records and LLM-driven company discovery.

Run with: cd backend && pytest tests/test_companies.py -v
"""
import json

import pytest


class TestCompanyStore:
    """Tests for the company service functions."""

    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, db_session):
        from jobradar.services.companies import list_companies, seed_companies

        seed = [("Acme", "https://acme.com"), ("Globex", "https://globex.com"), ("ACME", "https://acme.io")]

        assert await seed_companies(db_session, seed) == 2
        assert await seed_companies(db_session, seed) == 0
        assert [c.name for c in await list_companies(db_session)] == ["Acme", "Globex"]

    @pytest.mark.asyncio
    async def test_lookup_is_case_insensitive(self, db_session):
        from jobradar.services.companies import add_company, get_company_by_name

        await add_company(db_session, "Hugging Face", "https://huggingface.co")
        company = await get_company_by_name(db_session, "  hugging face ")
        assert company.homepage_url == "https://huggingface.co"

    @pytest.mark.asyncio
    async def test_names_unique_regardless_of_case(self, db_session):
        """The table rejects a casing variant even when the service check is bypassed."""
        from sqlalchemy import func, select
        from unittest.mock import AsyncMock, patch

        from jobradar.models import Company
        from jobradar.services.companies import add_company

        await add_company(db_session, "Acme", "https://acme.com")

        with patch("jobradar.services.companies.get_company_by_name", AsyncMock(return_value=None)):
            assert await add_company(db_session, "ACME", "https://acme.io") is None

        assert await db_session.scalar(select(func.count()).select_from(Company)) == 1

    def test_name_from_homepage(self):
        from jobradar.exceptions import ValidationFailure
        from jobradar.services.companies import name_from_homepage

        assert name_from_homepage("https://www.acme.com/about") == "acme.com"
        assert name_from_homepage("acme.io") == "acme.io"
        with pytest.raises(ValidationFailure):
            name_from_homepage("https://")

    @pytest.mark.asyncio
    async def test_get_or_create(self, db_session):
        from jobradar.services.companies import get_or_create_company

        created = await get_or_create_company(db_session, None, "https://www.initech.com")
        again = await get_or_create_company(db_session, "initech.com", None)

        assert created.name == "initech.com"
        assert again.id == created.id
        assert await get_or_create_company(db_session, "Nobody", None) is None

    @pytest.mark.asyncio
    async def test_discovery_status(self, db_session):
        from datetime import timedelta
        from jobradar.database import utcnow
        from jobradar.models import Company
        from jobradar.services.companies import discovery_status

        db_session.add_all([
            Company(name="A", homepage_url="https://a.com", career_page_url="https://a.com/careers", last_checked_at=utcnow()),
            Company(name="B", homepage_url="https://b.com", last_checked_at=utcnow() - timedelta(days=3)),
            Company(name="C", homepage_url="https://c.com"),
        ])
        await db_session.commit()

        status = await discovery_status(db_session)

        assert status == {
            "total_companies": 3,
            "companies_with_career_page": 1,
            "companies_checked_today": 1,
            "pending_companies": 2,
            "total_jobs": 0,
        }


class TestCompanyDiscoveryAgent:
    """Tests for CompanyDiscoveryAgent."""

    @pytest.mark.asyncio
    async def test_discover_from_query_validates_entries(self, db_session, mock_llm):
        from jobradar.services.companies import add_company
        from jobradar.services.company_discovery import CompanyDiscoveryAgent

        await add_company(db_session, "Stripe", "https://stripe.com")
        mock_llm.complete.return_value = json.dumps({
            "companies": [
                {"name": "Stripe", "homepageUrl": "https://stripe.com", "industry": "Fintech"},
                {"name": "Linear", "homepageUrl": "https://linear.app"},
                {"name": "NoUrl"},
                {"name": "Relative", "homepageUrl": "linear.app"},
                {"homepageUrl": "https://nameless.com"},
            ]
        })

        companies = await CompanyDiscoveryAgent(mock_llm).discover_from_query(db_session, "fintech")

        assert [(c.name, c.is_new) for c in companies] == [("Stripe", False), ("Linear", True)]
        assert companies[1].industry == "Other"
        _, kwargs = mock_llm.complete.call_args
        assert kwargs["temperature"] == 0.8

    @pytest.mark.asyncio
    async def test_failure_yields_empty(self, db_session, mock_llm):
        from jobradar.exceptions import UpstreamFailure
        from jobradar.services.company_discovery import CompanyDiscoveryAgent

        mock_llm.complete.side_effect = UpstreamFailure("down")
        assert await CompanyDiscoveryAgent(mock_llm).discover_from_query(db_session, "ai") == []

    @pytest.mark.asyncio
    async def test_discover_companies_dedupes_across_queries(self, db_session, mock_llm):
        from jobradar.services.company_discovery import CompanyDiscoveryAgent

        mock_llm.complete.side_effect = [
            json.dumps({"companies": [{"name": "Linear", "homepageUrl": "https://linear.app"}]}),
            json.dumps({"companies": [
                {"name": "linear", "homepageUrl": "https://linear.app"},
                {"name": "Raycast", "homepageUrl": "https://raycast.com"},
            ]}),
        ]
        agent = CompanyDiscoveryAgent(mock_llm, query_delay_seconds=0)

        companies = await agent.discover_companies(db_session, count=20)

        assert mock_llm.complete.await_count == 2
        assert [c.name for c in companies] == ["Linear", "Raycast"]

    @pytest.mark.asyncio
    async def test_save_discovered_only_new(self, db_session, mock_llm):
        from jobradar.schemas import DiscoveredCompany
        from jobradar.services.companies import list_companies
        from jobradar.services.company_discovery import CompanyDiscoveryAgent

        companies = [
            DiscoveredCompany(name="Linear", homepage_url="https://linear.app"),
            DiscoveredCompany(name="Stripe", homepage_url="https://stripe.com", is_new=False),
        ]

        saved = await CompanyDiscoveryAgent(mock_llm).save_discovered(db_session, companies)

        assert saved == 1
        assert [c.name for c in await list_companies(db_session)] == ["Linear"]
