from rules_audit.audit.matching import MESSAGE_MATCH_SCORE, MessagePool, keyword_overlap, match_score
from rules_audit.audit.models import CapturedMessage
from rules_audit.rules.models import RuleSeverity


def _message(message: str, field: str | None = "value_in", severity: RuleSeverity = RuleSeverity.ERROR):
    return CapturedMessage(field=field, message=message, severity=severity)


class TestKeywordOverlap:
    def test_counts_distinct_long_words(self):
        assert keyword_overlap("Belt Width must be greater than 0", "Belt Width must be greater than 0") == 5

    def test_case_insensitive(self):
        assert keyword_overlap("BELT speed", "belt SPEED high") == 2

    def test_ignores_short_words(self):
        assert keyword_overlap("is be of 0", "is be of 0") == 0

    def test_punctuation_stays_attached(self):
        assert keyword_overlap("Drop height is high.", "Drop height is high") == 2

    def test_duplicates_count_once(self):
        assert keyword_overlap("belt belt belt", "belt") == 1


class TestMatchScore:
    def test_field_mismatch_is_zero(self, make_definition):
        definition = make_definition("r", field="belt_width_in")

        assert match_score(definition, _message("Value must be greater than 0", field="other_in")) == 0

    def test_missing_field_never_matches(self, make_definition):
        definition = make_definition("r")

        assert match_score(definition, _message("Value must be greater than 0", field=None)) == 0

    def test_severity_mismatch_is_zero(self, make_definition):
        definition = make_definition("r", default_severity=RuleSeverity.WARNING)

        assert match_score(definition, _message("Value must be greater than 0")) == 0

    def test_message_match_substring(self, make_definition):
        definition = make_definition("r", message_match="exceeds 45°")

        assert match_score(definition, _message("Incline exceeds 45°. Not supported")) == MESSAGE_MATCH_SCORE

    def test_message_match_is_case_sensitive(self, make_definition):
        definition = make_definition("r", message_match="Premium feature:", check_description="zzz")

        assert match_score(definition, _message("premium feature: x")) == 1

    def test_keyword_fallback(self, make_definition):
        definition = make_definition("r", check_description="Belt speed exceeds 300 FPM")

        assert match_score(definition, _message("Belt speed exceeds 300 FPM")) == 1 + 5

    def test_field_and_severity_alone_score_one(self, make_definition):
        definition = make_definition("r", check_description="Completely different words")

        assert match_score(definition, _message("Nothing in common")) == 1

    def test_unmatched_message_match_falls_back_to_keywords(self, make_definition):
        definition = make_definition("r", message_match="exceeds 45°", check_description="Incline exceeds limit")

        assert match_score(definition, _message("Incline exceeds 35°")) == 1 + 2


class TestMessagePool:
    def test_best_match_prefers_highest_score(self, make_definition):
        definition = make_definition("r", check_description="Value must be greater than 0")
        pool = MessagePool([_message("Unrelated text"), _message("Value must be greater than 0")])

        claim = pool.best_match(definition)

        assert claim.index == 1
        assert claim.score == 1 + 4

    def test_tie_goes_to_first_in_pool(self, make_definition):
        definition = make_definition("r", check_description="zzz")
        pool = MessagePool([_message("first"), _message("second")])

        assert pool.best_match(definition).index == 0

    def test_claimed_messages_are_skipped(self, make_definition):
        definition = make_definition("r")
        pool = MessagePool([_message("one"), _message("two")])

        first = pool.claim(definition)
        second = pool.claim(definition)
        third = pool.claim(definition)

        assert (first.index, second.index) == (0, 1)
        assert third is None
        assert pool.claimed_indices == frozenset({0, 1})
        assert pool.unclaimed() == []

    def test_no_match_claims_nothing(self, make_definition):
        definition = make_definition("r", field="elsewhere")
        pool = MessagePool([_message("one")])

        assert pool.claim(definition) is None
        assert len(pool.unclaimed()) == 1
        assert len(pool) == 1
