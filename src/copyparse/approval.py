"""Approval-intent detection for proposed flow outlines.

A phrase-membership heuristic, not a semantic classifier: a message is an
approval iff it contains an affirmative phrase and no negation/change
request. Negation always wins, so "looks good but change the CTA" is not
an approval. Unusual phrasings will be misclassified; the caller lets the
user simply say it again.
"""
from __future__ import annotations

from dataclasses import dataclass

from copyparse.textmatch import PhraseHit, phrase_hits

AFFIRMATIVE_PHRASES: tuple[str, ...] = (
    "approved",
    "approve",
    "looks good",
    "look good",
    "let's proceed",
    "lets proceed",
    "generate the emails",
    "start creating",
    "go ahead",
    "perfect",
    "great",
    "yes",
    "yep",
    "yeah",
    "proceed",
    "continue",
    "let's go",
    "lets go",
    "do it",
    "make them",
    "create them",
)

# "not " keeps its trailing space so "nothing"/"notes" do not count.
NEGATION_PHRASES: tuple[str, ...] = (
    "not ",
    "don't",
    "wait",
    "hold",
    "change",
    "modify",
    "adjust",
    "edit",
    "update",
)


@dataclass(frozen=True, slots=True)
class ApprovalSignals:
    """Phrases found in a message, for explaining an approval decision."""

    affirmative: tuple[PhraseHit, ...]
    negations: tuple[PhraseHit, ...]

    @property
    def approved(self) -> bool:
        return bool(self.affirmative) and not self.negations


def _prepare(message: str) -> str:
    return message.replace("’", "'").lower().strip()


def approval_signals(message: str | None) -> ApprovalSignals:
    """Affirmative and negation phrase hits in ``message``."""
    if not message:
        return ApprovalSignals(affirmative=(), negations=())
    text = _prepare(message)
    return ApprovalSignals(
        affirmative=tuple(phrase_hits(text, AFFIRMATIVE_PHRASES)),
        negations=tuple(phrase_hits(text, NEGATION_PHRASES)),
    )


def is_approval(message: str | None) -> bool:
    """True iff the message approves the outline and asks for no changes."""
    return approval_signals(message).approved
