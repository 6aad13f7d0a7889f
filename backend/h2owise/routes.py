"""
Quiz API routes.

Endpoints (under the configured prefix, `/api` by default):
- GET    /questions          - List all questions
- POST   /question/add       - Insert a question
- DELETE /questions/{id}     - Delete a question
- POST   /submit             - Score answers, store the result
- GET    /leaderboard        - Top 10 stored scores
- GET    /badges/{username}  - Distinct badges a user has earned
- POST   /ai/generate        - Ask the AI model for a new question
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from h2owise.core.openrouter_qg import DEFAULT_TOPIC, QuestionGenerator
from h2owise.core.schemas import (
    AnswerKey,
    BadgesResponse,
    ErrorResponse,
    GenerateRequest,
    Question,
    QuestionCreate,
    ScoreRecord,
    SubmitRequest,
    SubmitResponse,
)
from h2owise.core.scoring import assign_badge, score_answers
from h2owise.core.store import QUESTIONS_TABLE, USER_SCORES_TABLE, DataStore

logger = logging.getLogger("h2owise")

DEFAULT_USERNAME = "Anonymous"
LEADERBOARD_SIZE = 10

router = APIRouter(tags=["quiz"])


# ------------------------------------------------------------
# Dependencies
# ------------------------------------------------------------
def get_store(request: Request) -> DataStore:
    return request.app.state.store


def get_generator(request: Request) -> QuestionGenerator:
    return request.app.state.generator


# ------------------------------------------------------------
# Questions
# ------------------------------------------------------------
@router.get("/questions", responses={200: {"model": List[Question]}})
async def list_questions(store: DataStore = Depends(get_store)):
    return await store.select(QUESTIONS_TABLE)


@router.post("/question/add", responses={200: {"model": List[Question]}})
async def add_question(req: QuestionCreate, store: DataStore = Depends(get_store)):
    inserted = await store.insert(QUESTIONS_TABLE, [req.model_dump()])
    logger.info(f"Added {len(inserted)} question(s)")
    return inserted


@router.delete("/questions/{question_id}", status_code=204)
async def delete_question(question_id: str, store: DataStore = Depends(get_store)):
    await store.delete(QUESTIONS_TABLE, {"id": question_id})
    logger.info(f"Deleted question id={question_id}")
    return Response(status_code=204)


# ------------------------------------------------------------
# Scoring
# ------------------------------------------------------------
def _answer_keys(rows: List[dict]) -> List[AnswerKey]:
    """Pull `id` / `correct_index` out of stored rows, skipping rows without a usable id."""
    keys = []
    for row in rows:
        try:
            keys.append(AnswerKey.model_validate(row))
        except ValidationError:
            logger.warning(f"Skipping unscorable question row id={row.get('id')!r}")
    return keys


@router.post("/submit", response_model=SubmitResponse)
async def submit(req: SubmitRequest, store: DataStore = Depends(get_store)):
    username = req.username or DEFAULT_USERNAME

    rows = await store.select(QUESTIONS_TABLE)

    score = score_answers(_answer_keys(rows), req.answers)
    badge = assign_badge(score)

    await store.insert(
        USER_SCORES_TABLE,
        [{"username": username, "score": score, "badge": badge.value}],
    )
    logger.info(f"Submission user={username!r} answered={len(req.answers)} score={score} badge={badge.value!r}")
    return SubmitResponse(score=score, badge=badge)


@router.get("/leaderboard", responses={200: {"model": List[ScoreRecord]}})
async def leaderboard(store: DataStore = Depends(get_store)):
    return await store.select(
        USER_SCORES_TABLE,
        order_by="score",
        ascending=False,
        limit=LEADERBOARD_SIZE,
    )


@router.get("/badges/{username}", response_model=BadgesResponse)
async def user_badges(username: str, store: DataStore = Depends(get_store)):
    rows = await store.select(USER_SCORES_TABLE, filters={"username": username})
    # first-seen order, duplicates dropped
    badges = list(dict.fromkeys(r["badge"] for r in rows if r.get("badge")))
    return BadgesResponse(username=username, badges=badges)


# ------------------------------------------------------------
# AI generation
# ------------------------------------------------------------
@router.post(
    "/ai/generate",
    responses={500: {"model": ErrorResponse, "description": "Error generating question"}},
)
async def ai_generate(
    req: Optional[GenerateRequest] = None,
    generator: QuestionGenerator = Depends(get_generator),
):
    topic = (req.topic if req else None) or DEFAULT_TOPIC
    try:
        return await generator.generate_question(topic)
    except Exception as e:
        logger.error(f"AI generation failed for topic={topic!r}", exc_info=True)
        return JSONResponse(
            {"error": str(e) or "Error generating question."},
            status_code=500,
        )
