from typing import Dict, Iterable, List, Sequence

from quiz.catalog import QuestionCatalog
from quiz.models import Answer, ScoreBreakdown


def resolve_top_personality(
    scores: ScoreBreakdown, answers: Sequence[Answer], catalog: QuestionCatalog
) -> str:
    """
    Determine the winning personality.

    Tie-break rules, in order:
    1. Highest total score wins
    2. If tied, highest single weighted contribution among the options
       the user actually selected
    3. If still tied, alphabetical order by personality id

    Same answers always produce the same winner.
    """
    if not scores:
        raise ValueError("Cannot resolve a winner from an empty score breakdown")

    max_score = max(scores.values())
    contenders = [pid for pid in scores if scores[pid] == max_score]
    if len(contenders) == 1:
        return contenders[0]

    contributions = max_contributions(contenders, answers, catalog)
    best = max(contributions.values())
    contenders = [pid for pid in contenders if contributions[pid] == best]
    if len(contenders) == 1:
        return contenders[0]

    return sorted(contenders)[0]


def max_contributions(
    personalities: Iterable[str], answers: Sequence[Answer], catalog: QuestionCatalog
) -> Dict[str, int]:
    """Largest weight * points any single selected option gave each personality (0 if none)."""
    result: Dict[str, int] = {pid: 0 for pid in personalities}
    targets: List[str] = list(result)

    for answer in answers:
        question, option = catalog.resolve(answer)
        for pid in targets:
            points = option.scores.get(pid)
            if points:
                result[pid] = max(result[pid], question.weight * points)

    return result
