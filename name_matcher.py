# name_matcher.py
# Cross-wiki god name matching.
#
# Two names refer to the same god when, case-folded, they are equal or one
# contains the other ("Chang'e" vs "Change" does NOT match; "The Morrigan" vs
# "Morrigan" does). Matching is greedy: the first candidate in listing order wins,
# so the SMITE 2 listing must be passed in the order it appears on the page.
#
# Known limitation, kept on purpose: a short name can match several longer
# ones ("Ra" is contained in "Ratatoskr"), and the first one listed wins.
#
# Names are stripped before comparing, and an empty or blank name matches
# nothing. Plain substring containment would treat "" as part of every name,
# so a god with a missing name would take the first listing entry.

from typing import Iterable, List, Optional


def fold(name: str) -> str:
    return (name or "").strip().casefold()


def matches(name_a: str, name_b: str) -> bool:
    a, b = fold(name_a), fold(name_b)
    if not a or not b:
        return False
    return a == b or a in b or b in a


def find_first_match(name: str, candidates: Iterable[str]) -> Optional[str]:
    for cand in candidates:
        if matches(name, cand):
            return cand
    return None


def unmatched(candidates: Iterable[str], names: Iterable[str]) -> List[str]:
    """Candidates (in order) that match none of names."""
    pool = [n for n in names if fold(n)]
    return [c for c in candidates if not any(matches(n, c) for n in pool)]
