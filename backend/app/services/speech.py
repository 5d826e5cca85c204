import logging
import re
from typing import Dict, List, Optional, Sequence

from app.models.schemas import Evaluation, SpeechAnalysis, SpeechMetrics
from app.services.scoring import round_half_up

logger = logging.getLogger(__name__)

FILLER_WORDS = (
    "um",
    "uh",
    "umm",
    "uhh",
    "like",
    "you know",
    "actually",
    "basically",
    "literally",
    "so",
    "right",
    "okay",
    "well",
    "kind of",
    "sort of",
)

# Feedback thresholds
MAX_FILLER_WORDS = 5
MINIMAL_FILLER_WORDS = 2
SLOW_WPM = 120
FAST_WPM = 180
IDEAL_WPM_LOW = 140
IDEAL_WPM_HIGH = 160


class SpeechAnalyzer:
    """Computes speech metrics for a transcribed answer"""

    def __init__(self, filler_words: Sequence[str] = FILLER_WORDS):
        self.filler_words = tuple(filler_words)
        self._patterns = {
            filler: re.compile(rf"\b{re.escape(filler)}\b", re.IGNORECASE)
            for filler in self.filler_words
        }

    def count_filler_words(self, transcript: str) -> Dict[str, int]:
        counts = {}
        for filler, pattern in self._patterns.items():
            found = len(pattern.findall(transcript))
            if found:
                counts[filler] = found
        return counts

    def analyze_transcript(self, transcript: str, speaking_time: float) -> SpeechAnalysis:
        """Filler word usage and speaking pace of ``transcript``.

        ``speaking_time`` is in seconds; a non-positive value yields a pace
        of zero.
        """
        filler_words = self.count_filler_words(transcript)
        total_words = len(transcript.split())
        if speaking_time > 0:
            words_per_minute = round_half_up(total_words / (speaking_time / 60))
        else:
            words_per_minute = 0

        logger.debug(
            "Analyzed transcript: %d words, %d fillers, %d wpm",
            total_words, sum(filler_words.values()), words_per_minute
        )
        return SpeechAnalysis(
            filler_word_count=sum(filler_words.values()),
            filler_words=filler_words,
            total_words=total_words,
            words_per_minute=words_per_minute,
            speaking_time=speaking_time,
        )


def annotate_speech_metrics(evaluation: Evaluation, metrics: Optional[SpeechMetrics]) -> Evaluation:
    """Copy speech metrics onto ``evaluation`` and add pace/filler feedback.

    Filler counts of 3-5 and paces of 120-139 or 161-180 wpm fall between
    the bands and add no feedback.
    """
    if metrics is None:
        return evaluation

    strengths: List[str] = list(evaluation.strengths)
    weaknesses: List[str] = list(evaluation.weaknesses)

    fillers = metrics.filler_word_count
    if fillers > MAX_FILLER_WORDS:
        weaknesses.append(f"Used {fillers} filler words - try to pause instead of filling silence")
    elif fillers == 0:
        strengths.append("Spoke clearly with no filler words")
    elif fillers <= MINIMAL_FILLER_WORDS:
        strengths.append("Spoke clearly with minimal filler words")

    wpm = metrics.words_per_minute
    if wpm < SLOW_WPM:
        weaknesses.append("Speaking pace too slow - try to keep a steadier, livelier rhythm")
    elif wpm > FAST_WPM:
        weaknesses.append("Speaking pace too fast - slow down so key points land")
    elif IDEAL_WPM_LOW <= wpm <= IDEAL_WPM_HIGH:
        strengths.append("Perfect pace - easy to follow")

    return evaluation.model_copy(update={
        "strengths": strengths,
        "weaknesses": weaknesses,
        "filler_word_count": metrics.filler_word_count,
        "filler_words": dict(metrics.filler_words),
        "words_per_minute": metrics.words_per_minute,
        "speaking_time": metrics.speaking_time,
    })


speech_analyzer = SpeechAnalyzer()
