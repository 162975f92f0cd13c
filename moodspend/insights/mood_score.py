"""
Mood text to stress score.

Keyword tables are checked in priority order: high stress wins over low
stress, which wins over neutral. Matching is a lower-cased substring test.
"""

HIGH_STRESS_SCORE = 80
LOW_STRESS_SCORE = 20
NEUTRAL_SCORE = 50

HIGH_STRESS_KEYWORDS: tuple[str, ...] = (
    "스트레스",
    "불안",
    "우울",
    "짜증",
    "분노",
    "화",
    "긴장",
    "피곤",
    "지쳤",
    "지침",
    "힘들",
    "압박",
    "슬픔",
    "초조",
    "걱정",
    "공황",
    "stress",
    "anxious",
    "anxiety",
    "sad",
    "angry",
    "tired",
    "exhausted",
    "upset",
    "depressed",
    "panic",
    "burnout",
)

LOW_STRESS_KEYWORDS: tuple[str, ...] = (
    "행복",
    "기쁨",
    "좋음",
    "즐거",
    "평온",
    "편안",
    "안정",
    "만족",
    "감사",
    "차분",
    "기분좋",
    "happy",
    "joy",
    "good",
    "calm",
    "relaxed",
    "content",
    "grateful",
    "peace",
)

NEUTRAL_KEYWORDS: tuple[str, ...] = (
    "보통",
    "평범",
    "무난",
    "그냥",
    "중간",
    "ok",
    "okay",
    "neutral",
)

SCORE_TABLE: tuple[tuple[tuple[str, ...], int], ...] = (
    (HIGH_STRESS_KEYWORDS, HIGH_STRESS_SCORE),
    (LOW_STRESS_KEYWORDS, LOW_STRESS_SCORE),
    (NEUTRAL_KEYWORDS, NEUTRAL_SCORE),
)


def compute_stress_score(mood: str | None) -> int:
    """
    Score a mood label: 80 (high stress), 20 (low stress) or 50 (neutral).

    Empty or unmatched text scores neutral.
    """
    value = (mood or "").strip().lower()
    if not value:
        return NEUTRAL_SCORE
    for keywords, score in SCORE_TABLE:
        if any(keyword in value for keyword in keywords):
            return score
    return NEUTRAL_SCORE
