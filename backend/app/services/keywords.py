from typing import List, NamedTuple, Optional

from app.models.schemas import Evaluation
from app.services.scoring import round_half_up

# At least this share of the expected keywords must appear in the answer
KEYWORD_PASS_THRESHOLD = 0.4
MAX_LISTED_KEYWORDS = 3


def _usable(keywords: Optional[List[str]]) -> List[str]:
    return [k for k in keywords or [] if isinstance(k, str) and k.strip()]


class KeywordCoverage(NamedTuple):
    score: int  # 0-10
    covered: List[str]
    missed: List[str]
    passed: bool


def check_keywords(keywords: List[str], answer_text: str) -> KeywordCoverage:
    """Split ``keywords`` into those present in the answer and those missing.

    Matching is a case-insensitive substring test. Blank keywords are
    ignored; a list with nothing else trivially passes.
    """
    keywords = _usable(keywords)
    if not keywords:
        return KeywordCoverage(score=10, covered=[], missed=[], passed=True)

    answer = answer_text.lower()
    covered = [k for k in keywords if k.strip().lower() in answer]
    missed = [k for k in keywords if k.strip().lower() not in answer]

    ratio = len(covered) / len(keywords)
    return KeywordCoverage(
        score=round_half_up(ratio * 10),
        covered=covered,
        missed=missed,
        passed=ratio >= KEYWORD_PASS_THRESHOLD,
    )


def apply_keyword_validation(
    evaluation: Evaluation,
    keywords: Optional[List[str]],
    answer_text: str,
) -> Evaluation:
    """Return ``evaluation`` with keyword coverage folded in.

    Questions without keywords (everything the AI generated) leave the
    evaluation untouched, as do lists of blank keywords.
    """
    if not _usable(keywords):
        return evaluation

    coverage = check_keywords(keywords, answer_text)
    strengths = list(evaluation.strengths)
    weaknesses = list(evaluation.weaknesses)

    if not coverage.passed:
        weaknesses.append(
            f"Missing key concepts: {', '.join(coverage.missed[:MAX_LISTED_KEYWORDS])}"
        )
    elif coverage.covered:
        strengths.append(
            f"Covered key concepts: {', '.join(coverage.covered[:MAX_LISTED_KEYWORDS])}"
        )

    return evaluation.model_copy(update={
        "strengths": strengths,
        "weaknesses": weaknesses,
        "keyword_score": coverage.score,
        "keywords_covered": coverage.covered,
        "keywords_missed": coverage.missed,
        "keyword_validation_passed": coverage.passed,
    })
