"""
Unit tests for the response parser (parse + reconcile onto the batch).
"""

import json

import pytest

from transcript_labeler.validation.response_parser import Parsed, ResponseParser, Unparseable


BATCH = [
    "We need to gather more requirements from the client.",
    "Let's brainstorm possible design alternatives.",
    "Okay.",
]


def as_pairs(results):
    return [(result.text, result.category) for result in results]


class TestResponseParser:
    """Test suite for ResponseParser."""

    def setup_method(self):
        self.parser = ResponseParser()

    def test_well_formed_array(self):
        content = json.dumps([
            {"text": BATCH[0], "category": "PROB"},
            {"text": BATCH[1], "category": "SOLN"},
            {"text": BATCH[2], "category": ""},
        ])

        outcome = self.parser.parse(content, BATCH)

        assert isinstance(outcome, Parsed)
        assert outcome.method == "strict"
        assert as_pairs(outcome.results) == [(BATCH[0], "PROB"), (BATCH[1], "SOLN"), (BATCH[2], "")]

    @pytest.mark.parametrize(
        "content",
        [
            "Sorry, I cannot help with that.",
            "",
            "[{\"text\": \"broken",
            "42",
            '"just a string"',
            '{"note": "no list inside"}',
        ],
    )
    def test_malformed_response_falls_back(self, content):
        """Every text kept, in order, with an empty category."""
        outcome = self.parser.parse(content, BATCH)

        assert isinstance(outcome, Unparseable)
        assert outcome.reason
        assert as_pairs(outcome.results) == [(text, "") for text in BATCH]

    def test_commentary_around_array(self):
        content = "Sure! Here you go:\n" + json.dumps([
            {"text": BATCH[0], "category": "PROB"},
            {"text": BATCH[1], "category": "SOLN"},
            {"text": BATCH[2], "category": ""},
        ]) + "\nHope this helps."

        outcome = self.parser.parse(content, BATCH)

        assert isinstance(outcome, Parsed)
        assert outcome.method == "extracted"
        assert [r.category for r in outcome.results] == ["PROB", "SOLN", ""]

    def test_reordered_items_matched_by_text(self):
        content = json.dumps([
            {"text": BATCH[2], "category": ""},
            {"text": BATCH[1], "category": "SOLN"},
            {"text": BATCH[0], "category": "PROB"},
        ])

        outcome = self.parser.parse(content, BATCH)

        assert as_pairs(outcome.results) == [(BATCH[0], "PROB"), (BATCH[1], "SOLN"), (BATCH[2], "")]

    def test_missing_items_default_to_empty(self):
        content = json.dumps([{"text": BATCH[1], "category": "SOLN"}])

        outcome = self.parser.parse(content, BATCH)

        assert isinstance(outcome, Parsed)
        assert as_pairs(outcome.results) == [(BATCH[0], ""), (BATCH[1], "SOLN"), (BATCH[2], "")]

    def test_extra_items_are_ignored(self):
        content = json.dumps([
            {"text": BATCH[0], "category": "PROB"},
            {"text": BATCH[1], "category": "SOLN"},
            {"text": BATCH[2], "category": ""},
            {"text": "Invented snippet", "category": "PROB"},
        ])

        outcome = self.parser.parse(content, BATCH)

        assert [r.text for r in outcome.results] == BATCH

    def test_paraphrased_text_falls_back_to_position(self):
        """Model rewording a snippet still labels it via its position."""
        content = json.dumps([
            {"text": "We need to gather more requirements", "category": "PROB"},
            {"text": BATCH[1], "category": "SOLN"},
            {"text": "Ok", "category": ""},
        ])

        outcome = self.parser.parse(content, BATCH)

        assert as_pairs(outcome.results) == [(BATCH[0], "PROB"), (BATCH[1], "SOLN"), (BATCH[2], "")]

    def test_exact_match_not_taken_by_earlier_fallback(self):
        """An exact match elsewhere in the output wins over a position pairing."""
        content = json.dumps([
            {"text": "b", "category": "SOLN"},
            {"text": "zzz", "category": "PROB"},
        ])

        outcome = self.parser.parse(content, ["a", "b"])

        assert as_pairs(outcome.results) == [("a", "PROB"), ("b", "SOLN")]

    def test_duplicate_texts_each_labeled_once(self):
        batch = ["Okay.", "Okay."]
        content = json.dumps([
            {"text": "Okay.", "category": "PROB"},
            {"text": "Okay.", "category": "SOLN"},
        ])

        outcome = self.parser.parse(content, batch)

        assert as_pairs(outcome.results) == [("Okay.", "PROB"), ("Okay.", "SOLN")]

    def test_unexpected_category_kept_verbatim(self):
        content = json.dumps([{"text": BATCH[0], "category": "MAYBE"}])

        outcome = self.parser.parse(content, BATCH[:1])

        assert outcome.results[0].category == "MAYBE"

    def test_null_and_missing_category_become_empty(self):
        content = json.dumps([{"text": BATCH[0], "category": None}, {"text": BATCH[1]}])

        outcome = self.parser.parse(content, BATCH[:2])

        assert [r.category for r in outcome.results] == ["", ""]

    def test_wrapped_results_object(self):
        content = json.dumps({"results": [{"text": BATCH[0], "category": "PROB"}]})

        outcome = self.parser.parse(content, BATCH[:1])

        assert isinstance(outcome, Parsed)
        assert outcome.results[0].category == "PROB"

    def test_single_item_object(self):
        content = json.dumps({"text": BATCH[0], "category": "SOLN"})

        outcome = self.parser.parse(content, BATCH[:1])

        assert as_pairs(outcome.results) == [(BATCH[0], "SOLN")]

    def test_non_object_items_default_to_empty(self):
        content = json.dumps(["PROB", "SOLN", ""])

        outcome = self.parser.parse(content, BATCH)

        assert isinstance(outcome, Parsed)
        assert as_pairs(outcome.results) == [(text, "") for text in BATCH]

    def test_deeply_nested_output_falls_back(self):
        outcome = self.parser.parse("[" * 100000, ["a"])

        assert isinstance(outcome, Unparseable)
        assert as_pairs(outcome.results) == [("a", "")]
