"""
Company Discovery Agent - grow the company list with LLM suggestions

Runs a handful of industry-flavoured queries against the chat model and
collects the real-looking companies it proposes. Suggestions are untrusted:
anything without a name and an http(s) homepage is dropped. Failures yield an
empty list for that query; discovery never raises.
"""

import asyncio
import logging
import math
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from jobradar.exceptions import UpstreamFailure
from jobradar.middleware.metrics import record_llm_failure
from jobradar.schemas import DiscoveredCompany
from jobradar.services.companies import add_company, get_company_by_name
from jobradar.services.llm import LLMClient, parse_json_object

logger = logging.getLogger(__name__)

INDUSTRY_QUERIES = [
    "top AI and machine learning startups hiring",
    "best fintech companies with open positions",
    "developer tools and DevOps companies hiring engineers",
    "SaaS companies with remote jobs",
    "Y Combinator backed startups hiring",
    "fast growing tech startups in India",
    "top cybersecurity companies hiring",
    "cloud infrastructure companies with jobs",
    "collaboration and productivity software companies",
    "e-commerce tech companies hiring developers",
]

SYSTEM_PROMPT = """You are a tech company researcher. Given a search query, suggest real tech companies that match.

CRITICAL: Respond with ONLY valid JSON. No markdown, no code blocks, no explanation.

OUTPUT FORMAT:
{"companies":[{"name":"Company Name","homepageUrl":"https://company.com","industry":"AI/ML"}]}

RULES:
1. Only suggest REAL tech companies with valid websites
2. Include a mix of well-known and emerging companies
3. URLs must be real and start with https://
4. Suggest 15-20 companies per query
5. Focus on companies that are likely hiring
6. Industry: AI/ML, Fintech, SaaS, Developer Tools, E-commerce, Healthcare, Security, Cloud, Collaboration, Other"""


class CompanyDiscoveryAgent:
    def __init__(self, llm: LLMClient, query_delay_seconds: float = 0.5):
        self.llm = llm
        self.query_delay_seconds = query_delay_seconds

    async def discover_companies(self, db: AsyncSession, count: int = 30) -> List[DiscoveredCompany]:
        """Run up to ceil(count / 10) industry queries, de-duplicated by name."""
        discovered: List[DiscoveredCompany] = []
        seen = set()

        for index, query in enumerate(INDUSTRY_QUERIES[: math.ceil(count / 10)]):
            if len(discovered) >= count:
                break
            if index > 0:
                await asyncio.sleep(self.query_delay_seconds)

            for company in await self.discover_from_query(db, query):
                key = company.name.lower()
                if key not in seen:
                    seen.add(key)
                    discovered.append(company)

        logger.info(f"Discovered {len(discovered)} unique companies total")
        return discovered[:count]

    async def discover_from_query(self, db: AsyncSession, query: str) -> List[DiscoveredCompany]:
        logger.info(f'Discovering companies: "{query}"')
        try:
            content = await self.llm.complete(
                [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": query},
                ],
                temperature=0.8,
            )
            data = parse_json_object(content)
        except (UpstreamFailure, ValueError) as e:
            record_llm_failure("discover_companies")
            logger.warning(f'Failed to discover from query "{query}": {e}')
            return []

        companies = []
        for entry in data.get("companies") or []:
            if not isinstance(entry, dict):
                continue
            name = entry.get("name")
            homepage_url = entry.get("homepageUrl")
            if not isinstance(name, str) or not name.strip():
                continue
            if not isinstance(homepage_url, str) or not homepage_url.startswith("http"):
                continue
            industry = entry.get("industry")
            companies.append(
                DiscoveredCompany(
                    name=name.strip(),
                    homepage_url=homepage_url.strip(),
                    industry=industry if isinstance(industry, str) and industry else "Other",
                    is_new=await get_company_by_name(db, name) is None,
                )
            )

        logger.info(f'Discovered {len(companies)} companies for: "{query}"')
        return companies

    async def save_discovered(self, db: AsyncSession, companies: List[DiscoveredCompany]) -> int:
        saved = 0
        for company in companies:
            if company.is_new and await add_company(db, company.name, company.homepage_url):
                saved += 1
        logger.info(f"Saved {saved} new companies to database")
        return saved
