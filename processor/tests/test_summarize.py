import pytest

from ..summarize import (
    MAX_CHARS,
    clean_and_filter,
    intelligent_summarization,
    is_educational,
    is_non_educational,
    score_sentence,
    summarize_text,
)


def test_short_text_is_unchanged():
    text = "Page 1\nClick here\nDensity is mass over volume."
    assert summarize_text(text) == text


def test_clean_and_filter_drops_noise():
    text = (
        "Page 3\n"
        "NAVIGATION MENU\n"
        "Visit https://example.com for more\n"
        "Density is defined as mass per unit volume.\n"
        "12345\n"
        "Click Next to continue\n"
    )
    cleaned = clean_and_filter(text)
    assert "Density is defined as mass per unit volume." in cleaned
    assert "https://" not in cleaned
    assert "NAVIGATION MENU" not in cleaned
    assert "Click Next" not in cleaned


@pytest.mark.parametrize("line,educational", [
    ("Use the formula for pressure", True),
    ("Lunch is at noon", False),
])
def test_is_educational(line, educational):
    assert is_educational(line) is educational


def test_is_non_educational():
    assert is_non_educational("HOME")
    assert is_non_educational("Copyright 2024 Example School")
    assert not is_non_educational("Density equals mass over volume")


def test_score_sentence_weights():
    assert score_sentence("The density of water is one gram per millilitre") == 15
    assert score_sentence("Click the menu to open navigation settings now") == 0
    assert score_sentence("short") == 0


def test_intelligent_summarization_keeps_best_sentences():
    text = (
        "The weather was pleasant on the day of the trip. "
        "Density is mass divided by volume for any object. "
        "Everyone enjoyed the sandwiches at lunch time."
    )
    summary = intelligent_summarization(text, target_length=60)
    assert summary == "Density is mass divided by volume for any object."


def test_long_text_is_condensed():
    filler = "We walked to the park and looked at the trees for a while.\n"
    key = "Pressure is force divided by area, measured in pascals.\n"
    text = (filler * 200 + key) * 2
    assert len(text) >= MAX_CHARS

    summary = summarize_text(text)
    assert len(summary) <= MAX_CHARS
    assert "Pressure is force divided by area" in summary
