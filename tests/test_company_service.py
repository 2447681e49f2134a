import asyncio
import json
import uuid
from datetime import timedelta

import pytest

from jobmete.errors import InternalError, InvalidArgumentError, NotFoundError
from jobmete.repositories.company_repository import CompanyRepository
from jobmete.services.company_service import CompanyService, is_analysis_stale
from jobmete.utils.time import utc_now
from tests.conftest import COMPANY_ANALYSIS, FakeGenAIClient, make_analysis_client


def run(session_maker, analysis_client, work):
    """Run ``work(service)`` inside a fresh session."""

    async def _run():
        async with session_maker() as session:
            return await work(CompanyService(session, analysis_client))

    return asyncio.run(_run())


def test_register_new_company_runs_analysis_and_persists(session_maker, analysis_client, fake_genai, make_user):
    user_id = make_user()

    result = run(session_maker, analysis_client, lambda s: s.register_company(user_id, " 株式会社コドモン "))

    assert result.is_duplicate is False
    company = result.company
    assert company.company_name == "株式会社コドモン"
    assert company.normalized_name == "コドモン"
    assert company.event_count == 0
    assert company.last_event_date is None
    assert company.analysis == COMPANY_ANALYSIS
    metadata = company.analysis_metadata
    assert metadata["status"] == "completed"
    assert metadata["version"] == "2.0"
    assert metadata["needs_update"] is False
    assert metadata["tokens_used"] == 0
    assert metadata["search_sources"] == []
    assert metadata["model_used"] == "gemini-test"
    assert "株式会社コドモン" in metadata["prompt"]
    assert json.loads(metadata["raw_response"]) == COMPANY_ANALYSIS
    assert len(fake_genai.calls) == 1


def test_register_spelling_variant_returns_duplicate_without_ai_call(session_maker, analysis_client, fake_genai, make_user):
    user_id = make_user()
    first = run(session_maker, analysis_client, lambda s: s.register_company(user_id, "株式会社コドモン"))

    second = run(session_maker, analysis_client, lambda s: s.register_company(user_id, "コドモン株式会社"))
    third = run(session_maker, analysis_client, lambda s: s.register_company(user_id, "㈱コドモン"))

    assert second.is_duplicate is True
    assert third.is_duplicate is True
    assert second.company.id == first.company.id == third.company.id
    assert len(fake_genai.calls) == 1


def test_companies_are_scoped_per_user(session_maker, analysis_client, make_user):
    alice = make_user("alice@example.com")
    bob = make_user("bob@example.com")

    a = run(session_maker, analysis_client, lambda s: s.register_company(alice, "コドモン"))
    b = run(session_maker, analysis_client, lambda s: s.register_company(bob, "コドモン"))

    assert b.is_duplicate is False
    assert a.company.id != b.company.id


@pytest.mark.parametrize("name", ["", "   ", None, "<script>x</script>", "a" * 101, "株式会社"])
def test_register_rejects_invalid_names_without_ai_call(session_maker, analysis_client, fake_genai, make_user, name):
    user_id = make_user()

    with pytest.raises(InvalidArgumentError):
        run(session_maker, analysis_client, lambda s: s.register_company(user_id, name))

    assert fake_genai.calls == []


def test_failed_analysis_persists_nothing(session_maker, make_user):
    user_id = make_user()
    broken = make_analysis_client(FakeGenAIClient(lambda _p: "not json"))

    with pytest.raises(InternalError):
        run(session_maker, broken, lambda s: s.register_company(user_id, "コドモン"))

    assert run(session_maker, broken, lambda s: s.list_companies(user_id)) == []


def test_unreachable_model_surfaces_internal_error(session_maker, make_user):
    user_id = make_user()
    down = make_analysis_client(FakeGenAIClient(lambda _p: ConnectionError("down")))

    with pytest.raises(InternalError):
        run(session_maker, down, lambda s: s.register_company(user_id, "コドモン"))


def test_unique_index_violation_is_reported_as_duplicate(session_maker, analysis_client, make_user):
    """A row inserted between the lookup and the insert wins the race."""
    user_id = make_user()
    state = {}

    async def racing_register():
        async with session_maker() as session:
            service = CompanyService(session, analysis_client)
            original_lookup = service.repository.get_by_normalized_name

            async def lookup_then_race(uid, normalized_name):
                if "winner_id" in state:
                    return await original_lookup(uid, normalized_name)
                async with session_maker() as other:
                    winner = await CompanyRepository(other).create(
                        uid, "コドモン", normalized_name, COMPANY_ANALYSIS, {"version": "2.0"}
                    )
                    await other.commit()
                    state["winner_id"] = winner.id
                return None

            service.repository.get_by_normalized_name = lookup_then_race
            return await service.register_company(user_id, "株式会社コドモン")

    result = asyncio.run(racing_register())

    assert result.is_duplicate is True
    assert result.company.id == state["winner_id"]
    companies = run(session_maker, analysis_client, lambda s: s.list_companies(user_id))
    assert len(companies) == 1


def test_reanalyze_overwrites_analysis_but_keeps_stats(session_maker, make_user):
    user_id = make_user()
    responses = [json.dumps(COMPANY_ANALYSIS), json.dumps({"marketAnalysis": {"industry": "教育"}})]
    client = make_analysis_client(FakeGenAIClient(lambda _p: responses.pop(0)))
    company = run(session_maker, client, lambda s: s.register_company(user_id, "コドモン")).company

    async def bump_stats(service):
        await service.repository.record_event(user_id, company.id, utc_now())
        await service.db.commit()

    run(session_maker, client, bump_stats)

    updated = run(session_maker, client, lambda s: s.reanalyze_company(user_id, str(company.id)))

    assert updated.analysis["marketAnalysis"]["industry"] == "教育"
    assert updated.event_count == 1
    assert updated.analysis_metadata["version"] == "2.0"


def test_reanalyze_requires_an_id(session_maker, analysis_client, make_user):
    user_id = make_user()
    for company_id in (None, "", "  "):
        with pytest.raises(InvalidArgumentError, match="companyId is required"):
            run(session_maker, analysis_client, lambda s: s.reanalyze_company(user_id, company_id))


def test_reanalyze_unknown_or_foreign_company_is_not_found(session_maker, analysis_client, make_user):
    owner = make_user("owner@example.com")
    other = make_user("other@example.com")
    company = run(session_maker, analysis_client, lambda s: s.register_company(owner, "コドモン")).company

    with pytest.raises(NotFoundError):
        run(session_maker, analysis_client, lambda s: s.reanalyze_company(owner, str(uuid.uuid4())))
    with pytest.raises(NotFoundError):
        run(session_maker, analysis_client, lambda s: s.reanalyze_company(owner, "not-a-uuid"))
    with pytest.raises(NotFoundError):
        run(session_maker, analysis_client, lambda s: s.reanalyze_company(other, str(company.id)))


def test_to_read_decodes_legacy_records(session_maker, analysis_client, make_user):
    user_id = make_user()
    legacy = {
        "businessOverview": "旧形式の概要",
        "strengths": ["強み"],
        "recentNews": "",
        "industryPosition": "業界2位",
        "recruitmentInsights": "",
    }

    async def create_legacy(service):
        company = await service.repository.create(
            user_id, "旧社", "旧社", legacy, {"version": "1.0", "analyzed_at": utc_now().isoformat()}
        )
        await service.db.commit()
        return service.to_read(company)

    view = run(session_maker, analysis_client, create_legacy)

    assert view.analysis.corporate_profile.business_summary == "旧形式の概要"
    assert view.analysis.market_analysis.industry_position == "業界2位"
    assert view.needs_reanalysis is False


def test_staleness_is_advisory_after_thirty_days():
    now = utc_now()
    assert is_analysis_stale(None, now) is True
    assert is_analysis_stale(now - timedelta(days=29), now, stale_days=30) is False
    assert is_analysis_stale(now - timedelta(days=30), now, stale_days=30) is True


def test_notes_update_and_delete(session_maker, analysis_client, make_user):
    user_id = make_user()
    company = run(session_maker, analysis_client, lambda s: s.register_company(user_id, "コドモン")).company

    updated = run(session_maker, analysis_client, lambda s: s.update_notes(user_id, company.id, "面接対策メモ"))
    assert updated.user_notes == "面接対策メモ"

    with pytest.raises(InvalidArgumentError):
        run(session_maker, analysis_client, lambda s: s.update_notes(user_id, company.id, "a" * 1001))

    run(session_maker, analysis_client, lambda s: s.delete_company(user_id, company.id))
    with pytest.raises(NotFoundError):
        run(session_maker, analysis_client, lambda s: s.get_company(user_id, company.id))
