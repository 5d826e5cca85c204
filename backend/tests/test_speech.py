import pytest

from app.models.schemas import SpeechMetrics
from app.services.scoring import default_evaluation
from app.services.speech import SpeechAnalyzer, annotate_speech_metrics


def metrics(fillers=1, wpm=130, speaking_time=45.0, breakdown=None):
    return SpeechMetrics(
        filler_word_count=fillers,
        filler_words=breakdown or {},
        words_per_minute=wpm,
        speaking_time=speaking_time,
    )

def added(before, after):
    return after[len(before):]


def test_missing_metrics_leave_evaluation_unchanged():
    evaluation = default_evaluation()
    assert annotate_speech_metrics(evaluation, None) is evaluation

def test_metrics_are_copied_onto_the_evaluation():
    evaluation = annotate_speech_metrics(
        default_evaluation(), metrics(fillers=3, wpm=150, speaking_time=42.5, breakdown={"um": 2, "like": 1})
    )
    assert evaluation.filler_word_count == 3
    assert evaluation.filler_words == {"um": 2, "like": 1}
    assert evaluation.words_per_minute == 150
    assert evaluation.speaking_time == 42.5

def test_no_fillers_adds_exactly_one_strength():
    base = default_evaluation()
    evaluation = annotate_speech_metrics(base, metrics(fillers=0, wpm=130))
    new_strengths = added(base.strengths, evaluation.strengths)
    assert len(new_strengths) == 1
    assert "no filler words" in new_strengths[0]
    assert evaluation.weaknesses == base.weaknesses

def test_many_fillers_adds_exactly_one_weakness_with_the_count():
    base = default_evaluation()
    evaluation = annotate_speech_metrics(base, metrics(fillers=6, wpm=150))
    assert [w for w in added(base.weaknesses, evaluation.weaknesses) if "6" in w] == [
        evaluation.weaknesses[-1]
    ]
    assert len(added(base.weaknesses, evaluation.weaknesses)) == 1

def test_minimal_fillers_is_a_strength():
    base = default_evaluation()
    evaluation = annotate_speech_metrics(base, metrics(fillers=2, wpm=130))
    assert added(base.strengths, evaluation.strengths) == ["Spoke clearly with minimal filler words"]

@pytest.mark.parametrize("wpm,expected", [
    (100, "too slow"),
    (200, "too fast"),
])
def test_pace_outside_range_is_a_weakness(wpm, expected):
    base = default_evaluation()
    evaluation = annotate_speech_metrics(base, metrics(fillers=4, wpm=wpm))
    new_weaknesses = added(base.weaknesses, evaluation.weaknesses)
    assert len(new_weaknesses) == 1
    assert expected in new_weaknesses[0]

@pytest.mark.parametrize("wpm", [140, 150, 160])
def test_ideal_pace_is_a_strength(wpm):
    base = default_evaluation()
    evaluation = annotate_speech_metrics(base, metrics(fillers=4, wpm=wpm))
    assert len(added(base.strengths, evaluation.strengths)) == 1
    assert "Perfect pace" in evaluation.strengths[-1]

@pytest.mark.parametrize("fillers,wpm", [(4, 120), (3, 130), (5, 139), (4, 161), (3, 180)])
def test_between_bands_adds_nothing(fillers, wpm):
    base = default_evaluation()
    evaluation = annotate_speech_metrics(base, metrics(fillers=fillers, wpm=wpm))
    assert evaluation.strengths == base.strengths
    assert evaluation.weaknesses == base.weaknesses

def test_analyzer_counts_whole_word_fillers():
    analysis = SpeechAnalyzer().analyze_transcript(
        "Um, so I think, you know, it's also like fine", speaking_time=5
    )
    assert analysis.filler_words == {"um": 1, "like": 1, "you know": 1, "so": 1}
    assert analysis.filler_word_count == 4
    assert analysis.total_words == 10
    assert analysis.words_per_minute == 120

def test_analyzer_handles_zero_speaking_time():
    analysis = SpeechAnalyzer().analyze_transcript("well okay", speaking_time=0)
    assert analysis.words_per_minute == 0
    assert analysis.filler_word_count == 2

def test_analyzer_accepts_custom_filler_list():
    analysis = SpeechAnalyzer(filler_words=["basically"]).analyze_transcript(
        "So basically it works, basically.", speaking_time=60
    )
    assert analysis.filler_words == {"basically": 2}
