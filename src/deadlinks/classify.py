"""
Response classification: ok, broken or expandable page.
"""
from __future__ import annotations

from typing import Union

from deadlinks.errors import HttpStatusError, TransportError
from deadlinks.extract import is_expandable
from deadlinks.models import Classification, FetchOutcome, Verdict

OK_STATUSES: frozenset[int] = frozenset((200, 204))


def classify(outcome: Union[FetchOutcome, TransportError], base_host: str) -> Classification:
    """Map a fetch outcome to a verdict."""
    if isinstance(outcome, TransportError):
        return Classification(Verdict.BROKEN, outcome)

    if outcome.status_code not in OK_STATUSES:
        return Classification(
            Verdict.BROKEN,
            HttpStatusError(outcome.status_code, outcome.status_message),
        )

    if is_expandable(outcome, base_host):
        return Classification(Verdict.EXPANDABLE)
    return Classification(Verdict.OK)
