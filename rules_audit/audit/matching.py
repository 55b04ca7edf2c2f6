"""
Attribution of fired validation messages to rule definitions.

The registry and the validation engine share no identifier, so a fired
message is attributed heuristically:

- field and severity must both match, otherwise the score is 0
- a definition's ``message_match`` found in the message scores MESSAGE_MATCH_SCORE
- otherwise the score is 1 plus the keyword overlap between the
  definition's check description and the message

Definitions claim messages in registry order; a claimed message is not
available to later definitions.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from rules_audit.audit.models import CapturedMessage
from rules_audit.rules.models import RuleDefinition

MESSAGE_MATCH_SCORE = 1000
MIN_KEYWORD_LENGTH = 3


def _keywords(text: str) -> list[str]:
    return text.lower().split()


def keyword_overlap(description: str, message: str) -> int:
    """
    Count distinct description words (longer than 2 characters) that also
    appear in the message. Words are whitespace-separated and lowercased;
    punctuation stays attached.
    """
    message_words = set(_keywords(message))
    description_words = {w for w in _keywords(description) if len(w) >= MIN_KEYWORD_LENGTH}
    return len(description_words & message_words)


def match_score(definition: RuleDefinition, message: CapturedMessage) -> int:
    """Score how well a fired message matches a definition; 0 means no match."""
    if message.field != definition.field:
        return 0

    if message.severity != definition.default_severity:
        return 0

    if definition.message_match and definition.message_match in message.message:
        return MESSAGE_MATCH_SCORE

    return 1 + keyword_overlap(definition.check_description, message.message)


@dataclass
class Claim:
    """A message attributed to a definition."""

    index: int
    score: int
    message: CapturedMessage


class MessagePool:
    """
    Ordered pool of captured messages with claim tracking.

    Messages keep their pool position for tie-breaking: among equal top
    scores the earliest unclaimed message wins.
    """

    def __init__(self, messages: Sequence[CapturedMessage]):
        self._messages = list(messages)
        self._claimed: set[int] = set()

    def best_match(self, definition: RuleDefinition) -> Claim | None:
        best_index = -1
        best_score = 0

        for index, message in enumerate(self._messages):
            if index in self._claimed:
                continue
            score = match_score(definition, message)
            if score > best_score:
                best_score = score
                best_index = index

        if best_index < 0:
            return None
        return Claim(index=best_index, score=best_score, message=self._messages[best_index])

    def claim(self, definition: RuleDefinition) -> Claim | None:
        """Find the best unclaimed message for ``definition`` and claim it."""
        found = self.best_match(definition)
        if found is not None:
            self._claimed.add(found.index)
        return found

    @property
    def claimed_indices(self) -> frozenset[int]:
        return frozenset(self._claimed)

    def unclaimed(self) -> list[CapturedMessage]:
        return [m for i, m in enumerate(self._messages) if i not in self._claimed]

    def __len__(self) -> int:
        return len(self._messages)
