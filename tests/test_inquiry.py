import pytest

from intent_api.services.inquiry import InquiryClassifier


@pytest.fixture
def classifier(default_profile):
    return InquiryClassifier(default_profile.inquiry)


@pytest.mark.parametrize(
    "text, intent, strength",
    [
        ("I want to apply for the MBA program", "Admissions Inquiry", "Strong"),
        ("I want to apply for a scholarship", "Admissions Inquiry", "Strong"),
        ("Can I speak with a counsellor?", "Counselling Request", "Strong"),
        ("What are the fees and scholarships?", "Fees & Financial Aid", "Medium"),
        ("Am I eligible with a 2.5 GPA", "Eligibility Check", "Medium"),
        ("Which specialization is best", "Program Selection", "Medium"),
        ("What about placements", "Career Outcomes", "Medium"),
        ("Is there a hostel on campus", "Campus & Experience", "Medium"),
        ("Just exploring for now", "Early Research", "Weak"),
        ("Hello there friend", "General Inquiry", "Weak"),
    ],
)
def test_classify(classifier, text, intent, strength):
    result = classifier.classify(text)
    assert (result.intent, result.strength) == (intent, strength)


@pytest.mark.parametrize("text", ["", None, "hi", "   ok   ", "a"])
def test_short_text_defaults_without_matching(classifier, text):
    result = classifier.classify(text)
    assert result.intent == "General Inquiry"
    assert result.strength == "Weak"
    assert result.matched_pattern is None


def test_classification_is_case_insensitive_and_idempotent(classifier):
    assert classifier.classify("APPLY now") == classifier.classify("apply now")
    assert classifier.classify("apply now") == classifier.classify("apply now")


def test_scores_and_adjustments(classifier):
    assert classifier.strength_score("Strong") == 20
    assert classifier.strength_score("Medium") == 12
    assert classifier.strength_score("Weak") == 6
    assert classifier.adjustment("Admissions Inquiry") == 8
    assert classifier.adjustment("Early Research") == -5
    assert classifier.adjustment("Something Else") == 0
