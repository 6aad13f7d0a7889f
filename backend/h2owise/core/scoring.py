"""
Quiz submission scoring and badge tiers.

Both functions are pure: they read nothing but their arguments and are
safe to call from any request handler.
"""

from typing import Dict, Iterable, Mapping, Optional

from .schemas import AnswerKey, Badge, RowId

GURU_THRESHOLD = 8
SAVER_THRESHOLD = 5


def score_answers(questions: Iterable[AnswerKey], answers: Mapping[RowId, int]) -> int:
    """Count the answers whose selected index matches the stored correct index.

    `questions` may be any objects carrying `id` and `correct_index`.
    Identifiers are compared by their string form: submitted JSON keys are
    always strings while the store may hand back integer ids. Answers for
    unknown questions count for nothing.
    """
    correct_by_id: Dict[str, Optional[int]] = {str(q.id): q.correct_index for q in questions}

    score = 0
    for qid, selected in answers.items():
        key = str(qid)
        if key in correct_by_id and correct_by_id[key] == selected:
            score += 1
    return score


def assign_badge(score: int) -> Badge:
    if score >= GURU_THRESHOLD:
        return Badge.GURU
    if score >= SAVER_THRESHOLD:
        return Badge.SAVER
    return Badge.LEARNER
