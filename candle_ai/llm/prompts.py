"""
Prompt builders for OHLCV prediction and analysis.

All builders return OpenAI-style message dicts ready for ``chat_completion``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .models import OHLCV, AnalysisType, Language
from .ohlcv import candles_to_json, validate_count

DEFAULT_PREDICTION_INSTRUCTIONS = "Based on these OHLCV data, predict the next period"

LANGUAGE_PROMPTS: dict[str, str] = {
    "en": "Please respond in English only.",
    "cn": "请使用中文回答。",
}

ANALYSIS_LANGUAGE_PROMPTS: dict[str, str] = {
    "en": "Please provide your analysis in English.",
    "cn": "请用中文进行分析。",
}

ANALYSIS_INSTRUCTIONS: dict[str, dict[str, str]] = {
    "trend": {
        "en": (
            "Provide a detailed trend analysis of this OHLCV data, including "
            "price direction, support/resistance levels, and trend strength."
        ),
        "cn": "提供详细的OHLCV数据趋势分析，包括价格方向、支撑/阻力位和趋势强度。",
    },
    "volume": {
        "en": (
            "Analyze the volume patterns in this OHLCV data, including volume "
            "trends, unusual volume spikes, and volume-price relationships."
        ),
        "cn": "分析OHLCV数据中的成交量模式，包括成交量趋势、异常成交量波动和量价关系。",
    },
    "technical": {
        "en": (
            "Perform technical analysis on this OHLCV data, identifying potential "
            "technical indicators, patterns, and trading signals."
        ),
        "cn": "对OHLCV数据进行技术分析，识别潜在的技术指标、图表形态和交易信号。",
    },
    "comprehensive": {
        "en": (
            "Provide a comprehensive analysis of this OHLCV data, covering trends, "
            "volume, technical aspects, and potential market implications."
        ),
        "cn": "提供全面的OHLCV数据分析，涵盖趋势、成交量、技术面和潜在市场影响。",
    },
}

_SINGLE_EXAMPLE = (
    '[{"open": 115.5, "high": 118.0, "low": 114.0, "close": 117.0, "volume": 1350000}]'
)
_MULTI_EXAMPLE_ROWS = (
    '  {"open": 115.5, "high": 118.0, "low": 114.0, "close": 117.0, "volume": 1350000},\n'
    '  {"open": 117.5, "high": 120.0, "low": 116.0, "close": 119.0, "volume": 1400000}'
)


def _check_language(language: str) -> None:
    if language not in LANGUAGE_PROMPTS:
        raise ValueError(f"Unsupported language '{language}', expected 'en' or 'cn'")


def language_prompt(language: Language) -> str:
    _check_language(language)
    return LANGUAGE_PROMPTS[language]


def apply_language_prompt(
    messages: Sequence[dict[str, Any]], language: Language
) -> list[dict[str, Any]]:
    """
    Append the language instruction to every system message, or insert a
    leading system message when there is none. Input messages are not mutated.
    """
    instruction = language_prompt(language)
    result = [dict(message) for message in messages]
    system_messages = [m for m in result if m.get("role") == "system"]
    if system_messages:
        for message in system_messages:
            message["content"] = f"{message['content']}\n{instruction}"
    else:
        result.insert(0, {"role": "system", "content": instruction})
    return result


def build_prediction_messages(
    candles: Sequence[OHLCV],
    instructions: str | None = None,
    count: int = 1,
) -> list[dict[str, str]]:
    """Messages asking for exactly ``count`` future candles as bare JSON."""
    validate_count(count)
    task = instructions or DEFAULT_PREDICTION_INSTRUCTIONS

    if count == 1:
        count_message = "Return EXACTLY 1 OHLCV object for the next period."
        example = f"Example of valid response for 1 period:\n{_SINGLE_EXAMPLE}"
    else:
        count_message = (
            f"Return EXACTLY {count} consecutive OHLCV objects for the next "
            f"{count} periods."
        )
        more = (
            f",\n  ... {count - 2} more OHLCV objects following the same pattern"
            if count > 2 else ""
        )
        example = (
            f"Example of valid response for {count} periods:\n"
            f"[\n{_MULTI_EXAMPLE_ROWS}{more}\n]"
        )

    system_prompt = (
        "You are a professional financial data analysis AI. The user will give "
        "you an array of OHLCV (Open, High, Low, Close, Volume) data.\n"
        f"Your task: {task}\n"
        "CRITICAL RULES:\n"
        f"1. {count_message}\n"
        "2. Return ONLY a JSON array of OHLCV objects, NO explanations, comments, "
        "or other text\n"
        "3. The OHLCV array format must match: [{open, high, low, close, volume}, ...]\n"
        "4. All numbers must be valid numbers\n"
        "5. Ensure technical rationality (high >= low, high >= close >= low, "
        "volume >= 0)\n"
        "6. Maintain consistency with historical trends and patterns\n"
        "7. For technical analysis, provide reasonable values based on typical "
        "patterns\n"
        "8. Do not include markdown formatting, only pure JSON\n\n"
        f"{example}"
    )
    user_message = (
        f"Here is the historical OHLCV data ({len(candles)} periods):\n"
        f"{candles_to_json(candles)}\n"
        "Please process this data according to the system instructions. "
        f"Remember to return EXACTLY {count} OHLCV object(s) in a JSON array "
        "with no additional text."
    )
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_message},
    ]


def _signed(value: float) -> str:
    return f"{'+' if value >= 0 else ''}{value:.2f}"


def summarize_candles(candles: Sequence[OHLCV], language: Language) -> str:
    """Dataset statistics block; empty for an empty series."""
    _check_language(language)
    if not candles:
        return ""

    first, last = candles[0], candles[-1]
    change = last.close - first.close
    change_percent = (change / first.close) * 100 if first.close else 0.0
    highest = max(c.high for c in candles)
    lowest = min(c.low for c in candles)
    average_volume = sum(c.volume for c in candles) / len(candles)

    if language == "en":
        return (
            f"This dataset contains {len(candles)} periods of OHLCV data.\n"
            f"Price range: {lowest:.2f} - {highest:.2f}\n"
            f"Overall price change: {_signed(change)} ({_signed(change_percent)}%)\n"
            f"Average volume: {average_volume:.0f}"
        )
    return (
        f"该数据集包含 {len(candles)} 个周期的OHLCV数据。\n"
        f"价格范围：{lowest:.2f} - {highest:.2f}\n"
        f"总体价格变化：{_signed(change)} ({_signed(change_percent)}%)\n"
        f"平均成交量：{average_volume:.0f}"
    )


def build_analysis_messages(
    candles: Sequence[OHLCV],
    language: Language,
    analysis_type: AnalysisType = "comprehensive",
    message: str | None = None,
) -> list[dict[str, str]]:
    """Messages asking for a free-text analysis in ``language``."""
    _check_language(language)
    if analysis_type not in ANALYSIS_INSTRUCTIONS:
        raise ValueError(f"Unsupported analysis type '{analysis_type}'")

    instruction = ANALYSIS_INSTRUCTIONS[analysis_type][language]
    data_info = summarize_candles(candles, language)
    data_json = candles_to_json(candles)
    periods = len(candles)

    if language == "en":
        characteristics = f"Data characteristics:\n{data_info}\n\n" if data_info else ""
        system_prompt = (
            "You are a professional financial data analyst. Your task is to analyze "
            "OHLCV (Open, High, Low, Close, Volume) data and provide insights.\n"
            f"Analysis focus: {instruction}\n"
            f"{characteristics}\n"
            "Please provide:\n"
            "1. Clear and structured analysis\n"
            "2. Key observations from the data\n"
            "3. Potential implications or insights\n"
            "4. Recommendations or considerations (if applicable)\n"
            "Format your response as a well-organized text analysis."
        )
        if message:
            user_message = (
                f"Here is the OHLCV data ({periods} periods):\n{data_json}\n"
                f"My specific question or request: {message}\n"
                "Please analyze this data considering my request above."
            )
        else:
            user_message = (
                f"Here is the OHLCV data ({periods} periods):\n{data_json}\n"
                "Please analyze this data as requested."
            )
    else:
        characteristics = f"数据特征：\n{data_info}\n\n" if data_info else ""
        system_prompt = (
            "您是一位专业的金融数据分析师。您的任务是分析OHLCV（开盘价、最高价、"
            "最低价、收盘价、成交量）数据并提供见解。\n"
            f"分析重点：{instruction}\n"
            f"{characteristics}\n"
            "请提供：\n"
            "1. 清晰且有结构的分析\n"
            "2. 数据的关键观察结果\n"
            "3. 潜在的启示或见解\n"
            "4. 建议或注意事项（如适用）\n"
            "请以组织良好的文本分析形式回复。"
        )
        if message:
            user_message = (
                f"这是OHLCV数据（{periods}个周期）：\n{data_json}\n"
                f"我的具体问题或需求：{message}\n"
                "请根据我的上述需求分析这些数据。"
            )
        else:
            user_message = (
                f"这是OHLCV数据（{periods}个周期）：\n{data_json}\n"
                "请按要求分析这些数据。"
            )

    system_prompt += f"\n\n{ANALYSIS_LANGUAGE_PROMPTS[language]}"
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_message},
    ]


def build_structured_analysis_messages(
    candles: Sequence[OHLCV],
    language: Language,
    message: str | None = None,
) -> list[dict[str, str]]:
    """Messages asking for a JSON summary/details/recommendations object."""
    _check_language(language)
    data_json = candles_to_json(candles)

    if language == "en":
        system_prompt = (
            "You are a professional financial data analyst. Analyze the OHLCV data "
            "and provide a structured response with:\n"
            "1. Summary (brief overview)\n"
            "2. Details (key observations, 3-5 points)\n"
            "3. Recommendations (actionable insights, 2-3 points)\n"
            'Format as JSON: {"summary": "...", "details": ["...", "..."], '
            '"recommendations": ["...", "..."]}'
        )
        user_message = f"Analyze this OHLCV data ({len(candles)} periods):\n{data_json}"
        if message:
            user_message += f"\n\nAdditional request: {message}"
    else:
        system_prompt = (
            "您是一位专业的金融数据分析师。分析OHLCV数据并提供结构化响应：\n"
            "1. 总结（简要概述）\n"
            "2. 详情（关键观察结果，3-5点）\n"
            "3. 建议（可操作的见解，2-3点）\n"
            '格式化为JSON：{"summary": "...", "details": ["...", "..."], '
            '"recommendations": ["...", "..."]}'
        )
        user_message = f"分析此OHLCV数据（{len(candles)}个周期）：\n{data_json}"
        if message:
            user_message += f"\n\n附加要求：{message}"

    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_message},
    ]
