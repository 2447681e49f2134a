import pytest
from pydantic import ValidationError

from jobmete.schemas.company import CompanyAnalysis, decode_analysis
from jobmete.schemas.trend import TrendSummaryPayload

pytestmark = pytest.mark.unit


LEGACY_ANALYSIS = {
    "businessOverview": "保育ICTサービス",
    "strengths": ["導入実績"],
    "recentNews": "資金調達",
    "industryPosition": "保育ICT業界、国内大手",
    "recruitmentInsights": "情報が見つかりませんでした",
}


def test_legacy_analysis_decodes_into_four_sections():
    analysis = decode_analysis("1.0", LEGACY_ANALYSIS)

    assert analysis.corporate_profile.business_summary == "保育ICTサービス"
    assert analysis.market_analysis.strengths == ["導入実績"]
    assert analysis.market_analysis.industry_position == "保育ICT業界、国内大手"
    assert analysis.future_direction.recent_news == "資金調達"
    assert analysis.work_environment.recruitment_insights == "情報が見つかりませんでした"
    assert analysis.industry_label == "保育ICT業界、国内大手"


def test_unversioned_analysis_is_treated_as_legacy():
    assert decode_analysis(None, LEGACY_ANALYSIS).corporate_profile.business_summary == "保育ICTサービス"


def test_current_analysis_decodes_as_is():
    analysis = decode_analysis("2.0", {"marketAnalysis": {"industry": "IT", "competitors": ["A社"]}})

    assert analysis.market_analysis.industry == "IT"
    assert analysis.market_analysis.competitors == ["A社"]
    assert analysis.corporate_profile.main_products == []


def test_unknown_version_is_rejected():
    with pytest.raises(ValueError):
        decode_analysis("9.9", {})


def test_null_fields_fall_back_to_defaults():
    analysis = CompanyAnalysis.model_validate(
        {"corporateProfile": {"businessSummary": None, "mainProducts": None}}
    )
    assert analysis.corporate_profile.business_summary == ""
    assert analysis.corporate_profile.main_products == []


def test_analysis_serializes_with_camel_case_keys():
    dumped = CompanyAnalysis().model_dump(by_alias=True)
    assert set(dumped) == {"corporateProfile", "marketAnalysis", "futureDirection", "workEnvironment"}
    assert "businessSummary" in dumped["corporateProfile"]


def test_trend_lists_are_sorted_and_capped():
    payload = TrendSummaryPayload.model_validate(
        {
            "overallTrend": "IT志向",
            "topIndustries": [{"name": f"業界{i}", "count": i, "percentage": 1.0} for i in range(12)],
            "commonKeywords": [{"word": f"kw{i}", "count": i} for i in range(15)],
        }
    )

    assert len(payload.top_industries) == 10
    assert payload.top_industries[0].name == "業界11"
    assert [k.count for k in payload.common_keywords] == list(range(14, 4, -1))


def test_trend_percentages_are_rescaled_to_at_most_100():
    payload = TrendSummaryPayload.model_validate(
        {
            "overallTrend": "x",
            "topIndustries": [
                {"name": "A", "count": 2, "percentage": 80.0},
                {"name": "B", "count": 1, "percentage": 70.0},
            ],
        }
    )

    assert sum(i.percentage for i in payload.top_industries) <= 100.0
    assert payload.top_industries[0].percentage == pytest.approx(53.3)


def test_trend_percentages_within_bounds_are_kept():
    payload = TrendSummaryPayload.model_validate(
        {"overallTrend": "x", "topIndustries": [{"name": "A", "count": 1, "percentage": 60.0}]}
    )
    assert payload.top_industries[0].percentage == 60.0


def test_match_insight_buckets_are_capped_at_three():
    payload = TrendSummaryPayload.model_validate(
        {
            "overallTrend": "x",
            "matchInsights": {
                "highMatchCompanies": [
                    {"companyName": f"C{i}", "avgMatchRate": 4.5, "reason": "r"} for i in range(5)
                ],
                "careerAdvice": "advice",
            },
        }
    )
    assert len(payload.match_insights.high_match_companies) == 3
    assert payload.match_insights.low_match_companies == []


def test_trend_payload_requires_overall_trend():
    with pytest.raises(ValidationError):
        TrendSummaryPayload.model_validate({"topIndustries": []})
