"""
Prompt for the single-company analysis.
"""

NOT_FOUND_TEXT = "情報が見つかりませんでした"


def build_company_analysis_prompt(company_name: str) -> str:
    """
    Render the analysis request for one company.

    The model is asked for the four-section JSON stored as analysis
    version 2.0. Unknown facts must be reported with NOT_FOUND_TEXT rather
    than guessed.
    """
    return f"""あなたは就職活動をサポートするAIアシスタントです。
以下の企業について、公開されている情報をもとに就活生向けの企業分析を行ってください。

企業名: {company_name}

以下の4つの観点について、日本語で回答してください。

1. **企業概要** (corporateProfile)
   - businessSummary: 主要事業を200文字以内で簡潔に説明（何をしている会社なのかが分かるように）
   - founded: 設立年（例: "1995年"）
   - headquarters: 本社所在地（例: "東京都港区"）
   - employeeCount: 従業員数（例: "約5,000名（連結）"）
   - mainProducts: 主要な製品・サービスを3〜5個

2. **市場分析** (marketAnalysis)
   - industry: 業界名を20文字以内で（例: "IT・ソフトウェア"）
   - industryPosition: 市場でのポジションを50文字以内で（例: "Eコマース業界、国内最大手"）
   - strengths: 競争優位性や特徴を3〜5個のキーワードで（例: "技術力", "グローバル展開"）
   - competitors: 主な競合企業を3〜5社

3. **今後の方向性** (futureDirection)
   - recentNews: 直近1年以内のニュースやトピックを150文字以内で要約（新製品、業績、M&Aなど）
   - vision: 企業が掲げるビジョンや中期経営方針を100文字以内で
   - growthAreas: 注力している成長分野を3〜5個

4. **働く環境** (workEnvironment)
   - culture: 社風や働き方の特徴を100文字以内で
   - recruitmentInsights: 新卒採用の特徴を150文字以内で
   - desiredTalent: 求める人物像を3〜5個のキーワードで

**重要**:
- 確認できない情報は推測で埋めず、文字列の項目には「{NOT_FOUND_TEXT}」と記載し、配列の項目は空配列にしてください。
- 回答は以下のJSON形式のみで出力してください（他のテキストは一切含めないこと）。

{{
  "corporateProfile": {{
    "businessSummary": "事業内容の説明",
    "founded": "設立年",
    "headquarters": "本社所在地",
    "employeeCount": "従業員数",
    "mainProducts": ["製品1", "製品2", "製品3"]
  }},
  "marketAnalysis": {{
    "industry": "業界名",
    "industryPosition": "業界ポジション",
    "strengths": ["強み1", "強み2", "強み3"],
    "competitors": ["競合1", "競合2", "競合3"]
  }},
  "futureDirection": {{
    "recentNews": "最近の動向",
    "vision": "ビジョン",
    "growthAreas": ["成長分野1", "成長分野2", "成長分野3"]
  }},
  "workEnvironment": {{
    "culture": "社風",
    "recruitmentInsights": "採用情報",
    "desiredTalent": ["人物像1", "人物像2", "人物像3"]
  }}
}}
"""
