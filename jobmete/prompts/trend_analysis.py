"""
Prompt for the aggregate trend analysis across a user's companies.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from jobmete.schemas.company import CompanyAnalysis
from jobmete.schemas.trend import MAX_INSIGHT_ITEMS, MAX_RANKED_ITEMS, ReviewStats


@dataclass(frozen=True)
class TrendCompany:
    """Company line of the trend prompt."""

    company_name: str
    analysis: CompanyAnalysis


@dataclass(frozen=True)
class ReviewedEvent:
    """Reviewed event line of the trend prompt."""

    company_name: str
    event_type: str
    company_match_rate: int
    job_match_rate: int
    feedback: str = ""
    job_position: Optional[str] = None


def _render_companies(companies: Sequence[TrendCompany]) -> str:
    lines = []
    for index, company in enumerate(companies, start=1):
        analysis = company.analysis
        lines.append(
            f"{index}. {company.company_name}\n"
            f"   業界: {analysis.industry_label}\n"
            f"   事業内容: {analysis.corporate_profile.business_summary}\n"
            f"   強み: {', '.join(analysis.market_analysis.strengths)}"
        )
    return "\n\n".join(lines)


def _render_reviews(reviewed_events: Sequence[ReviewedEvent]) -> str:
    lines = []
    for index, event in enumerate(reviewed_events, start=1):
        lines.append(
            f"{index}. {event.company_name}（{event.event_type}）\n"
            f"   職種: {event.job_position or '未設定'}\n"
            f"   企業マッチ度: {event.company_match_rate}/5\n"
            f"   職種マッチ度: {event.job_match_rate}/5\n"
            f"   感想: {event.feedback or 'なし'}"
        )
    return "\n\n".join(lines)


def _render_stats(stats: ReviewStats) -> str:
    lines = [
        f"- レビュー件数: {stats.total_reviews}件",
        f"- 平均企業マッチ度: {stats.avg_company_match:.1f}/5",
        f"- 平均職種マッチ度: {stats.avg_job_match:.1f}/5",
    ]
    for position in stats.job_position_stats:
        lines.append(
            f"- 職種「{position.position}」: {position.count}件、"
            f"企業マッチ度 {position.avg_company_match:.1f}、職種マッチ度 {position.avg_job_match:.1f}"
        )
    for company in stats.company_stats:
        lines.append(
            f"- 企業「{company.company_name}」: {company.review_count}件、"
            f"企業マッチ度 {company.avg_company_match:.1f}、職種マッチ度 {company.avg_job_match:.1f}"
        )
    return "\n".join(lines)


def build_trend_analysis_prompt(
    companies: Sequence[TrendCompany],
    reviewed_events: Sequence[ReviewedEvent],
    review_stats: Optional[ReviewStats] = None,
) -> str:
    """
    Render the aggregate analysis request.

    Reviews are optional. Without them the model is told to return
    ``"matchInsights": null`` instead of inventing insights.
    """
    has_reviews = len(reviewed_events) > 0
    sections: List[str] = [
        "あなたは就職活動のキャリアアドバイザーです。\n"
        "学生が興味を持っている企業リストと選考レビューから、志望傾向を分析してください。",
        f"# 登録企業リスト（{len(companies)}社）\n\n{_render_companies(companies)}",
    ]

    if has_reviews:
        sections.append(
            f"# 選考レビュー（{len(reviewed_events)}件）\n\n{_render_reviews(reviewed_events)}"
        )
        if review_stats is not None:
            sections.append(f"# レビュー統計\n\n{_render_stats(review_stats)}")

    if has_reviews:
        match_insights_format = f"""  "matchInsights": {{
    "highMatchCompanies": [
      {{"companyName": "企業名", "avgMatchRate": 4.5, "reason": "マッチ度が高い理由"}}
    ],
    "lowMatchCompanies": [
      {{"companyName": "企業名", "avgMatchRate": 2.0, "reason": "マッチ度が低い理由"}}
    ],
    "recommendedJobPositions": [
      {{"position": "職種名", "avgMatchRate": 4.0, "reason": "おすすめする理由"}}
    ],
    "careerAdvice": "レビュー内容を踏まえたキャリアアドバイス"
  }}"""
        match_insights_point = (
            "5. **matchInsights**: レビューのマッチ度と感想から、マッチ度の高い企業・低い企業・"
            f"おすすめの職種をそれぞれ最大{MAX_INSIGHT_ITEMS}件挙げ、200文字以内のキャリアアドバイスを記載"
        )
    else:
        match_insights_format = '  "matchInsights": null'
        match_insights_point = (
            "5. **matchInsights**: レビューデータがないため、必ず null を返してください"
            "（キーを省略したり、内容を推測したりしないこと）"
        )

    sections.append(
        "# 分析指示\n\n"
        "以下のJSON形式で傾向分析結果を返してください：\n\n"
        "{\n"
        '  "overallTrend": "学生の志望傾向の要約",\n'
        '  "topIndustries": [\n'
        '    {"name": "IT・ソフトウェア", "count": 5, "percentage": 50.0}\n'
        "  ],\n"
        '  "commonKeywords": [\n'
        '    {"word": "DX", "count": 8}\n'
        "  ],\n"
        '  "recommendedSkills": ["データ分析", "コミュニケーション能力"],\n'
        f"{match_insights_format}\n"
        "}"
    )

    sections.append(
        "## 分析ポイント\n\n"
        "1. **overallTrend**: 学生がどのような業界・企業に興味を持っているか、共通点は何かを200文字以内で要約\n"
        f"2. **topIndustries**: 業界別の分布（上位{MAX_RANKED_ITEMS}業界まで、countの多い順、"
        "percentageは小数点第1位までで合計100以下）\n"
        f"3. **commonKeywords**: 企業の特徴や強みから頻出するキーワードを抽出（上位{MAX_RANKED_ITEMS}個まで、countの多い順）\n"
        "4. **recommendedSkills**: これらの企業で求められるスキルを5個程度提案\n"
        f"{match_insights_point}\n\n"
        "必ず上記のJSON形式で返してください。他の説明文は不要です。"
    )

    return "\n\n".join(sections)
