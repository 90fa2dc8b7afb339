"""FastAPI application with all routes."""
from __future__ import annotations

import logging

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, HTTPException, Request

from sentence_builder.config import Settings, load_settings, save_settings
from sentence_builder.errors import (
    GenerationError,
    IncompleteSentenceError,
    NoQuestionsForDifficultyError,
    PoolEmptyError,
    SessionFinishedError,
    SourceUnreachableError,
)
from sentence_builder.models import DIFFICULTIES
from sentence_builder.parsers.question_parser import load_question_pool
from sentence_builder.question_generator import generate_questions, get_llm
from sentence_builder.selector import QuestionPool, select_questions
from sentence_builder.session import QuizSession

app = FastAPI(title="Sentence Builder")

_log = logging.getLogger("sentence_builder.app")

# Global state (initialized in startup)
_settings: Settings | None = None
_pool: QuestionPool | None = None
_pool_error: str = ""
_active_sessions: dict[str, QuizSession] = {}


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


def get_pool() -> QuestionPool:
    if _pool is None:
        raise HTTPException(503, _pool_error or "Question pool not loaded")
    return _pool


def get_session(session_id: str) -> QuizSession:
    session = _active_sessions.get(session_id)
    if session is None:
        raise HTTPException(404, "Session not found")
    return session


async def _load_pool() -> None:
    global _pool, _pool_error
    s = get_settings()
    try:
        _pool = await load_question_pool(s.questions_location)
        _pool_error = ""
        _log.info("Loaded %d questions from %s", len(_pool), s.questions_source)
    except (PoolEmptyError, SourceUnreachableError) as e:
        _pool = None
        _pool_error = str(e)
        _log.error("Could not load questions: %s", e)


@app.on_event("startup")
async def startup():
    global _settings
    if _settings is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()
    await _load_pool()


@app.on_event("shutdown")
async def shutdown():
    for session in _active_sessions.values():
        session.timer.stop()


def _check_difficulty(difficulty: str) -> str:
    if difficulty not in DIFFICULTIES:
        raise HTTPException(400, f"Unknown difficulty '{difficulty}'. Choose one of: {', '.join(DIFFICULTIES)}")
    return difficulty


async def _json_body(request: Request) -> dict:
    return await request.json() if await request.body() else {}


def _int_field(body: dict, name: str, default: int) -> int:
    value = body.get(name, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise HTTPException(400, f"{name} must be an integer, got {value!r}")


# Settings field annotations are strings (postponed evaluation)
_SETTING_TYPES = {"str": str, "int": int, "bool": bool}


# ── API: Question pool ────────────────────────────────────────────────────

@app.get("/api/pool")
async def api_pool():
    pool = get_pool()
    return {
        "total": len(pool),
        "by_difficulty": pool.counts(),
        "rejected_rows": len(pool.errors),
        "errors": [str(e) for e in pool.errors],
    }


@app.post("/api/pool/reload")
async def api_pool_reload():
    await _load_pool()
    return await api_pool()


# ── API: Generate questions ───────────────────────────────────────────────

@app.post("/api/generate")
async def api_generate(request: Request):
    body = await _json_body(request)
    s = get_settings()
    count = _int_field(body, "count", s.session_size)
    difficulty = _check_difficulty(body.get("difficulty", s.default_difficulty))

    pool = get_pool()
    try:
        llm = get_llm(s)
    except ValueError as e:
        raise HTTPException(400, str(e))
    try:
        questions = await generate_questions(
            llm, count=count, difficulty=difficulty,
            seen_ids={q.id for q in pool}, thinking=s.llm_thinking,
        )
    except (GenerationError, SourceUnreachableError) as e:
        raise HTTPException(502, str(e))
    added = pool.add(questions)
    return {
        "generated": len(added),
        "pool_size": len(pool),
        "questions": [q.to_dict() for q in added],
    }


# ── API: Session management ──────────────────────────────────────────────

def _snapshot(session: QuizSession) -> dict:
    """Session state for the client; a finished session is dropped after this."""
    data = session.to_dict()
    if session.finished:
        _active_sessions.pop(session.id, None)
    return data


def _drop_finished_sessions() -> None:
    for sid in [sid for sid, s in _active_sessions.items() if s.finished]:
        del _active_sessions[sid]


@app.post("/api/session/start")
async def api_session_start(request: Request):
    body = await _json_body(request)
    s = get_settings()
    difficulty = _check_difficulty(body.get("difficulty", s.default_difficulty))
    count = _int_field(body, "count", s.session_size)

    try:
        questions = select_questions(get_pool(), count, difficulty)
    except NoQuestionsForDifficultyError as e:
        raise HTTPException(404, str(e))

    # Timed-out sessions nobody polled again
    _drop_finished_sessions()
    session = QuizSession(questions, s.time_limit_seconds, difficulty=difficulty)
    _active_sessions[session.id] = session
    session.start_timer()
    return _snapshot(session)


@app.get("/api/session/{session_id}")
async def api_session_state(session_id: str):
    return _snapshot(get_session(session_id))


@app.post("/api/session/{session_id}/place")
async def api_session_place(session_id: str, request: Request):
    body = await _json_body(request)
    session = get_session(session_id)
    word = body.get("word", "")
    try:
        slot = session.place_word(word)
    except SessionFinishedError as e:
        _active_sessions.pop(session_id, None)
        raise HTTPException(409, str(e))
    data = _snapshot(session)
    data["placed_slot"] = slot
    return data


@app.post("/api/session/{session_id}/remove")
async def api_session_remove(session_id: str, request: Request):
    body = await _json_body(request)
    session = get_session(session_id)
    slot = body.get("slot")
    if not isinstance(slot, int):
        raise HTTPException(400, "slot must be an integer")
    try:
        word = session.remove_word(slot)
    except SessionFinishedError as e:
        _active_sessions.pop(session_id, None)
        raise HTTPException(409, str(e))
    data = _snapshot(session)
    data["removed_word"] = word
    return data


@app.post("/api/session/{session_id}/submit")
async def api_session_submit(session_id: str):
    session = get_session(session_id)
    try:
        answer = session.submit()
    except IncompleteSentenceError as e:
        raise HTTPException(400, str(e))
    except SessionFinishedError as e:
        _active_sessions.pop(session_id, None)
        raise HTTPException(409, str(e))
    data = _snapshot(session)
    data["answer"] = answer.to_dict()
    return data


@app.post("/api/session/{session_id}/finish")
async def api_session_finish(session_id: str):
    session = get_session(session_id)
    session.finish("abandoned")
    return _snapshot(session)


# ── API: Settings ─────────────────────────────────────────────────────────

@app.get("/api/settings")
async def api_get_settings():
    return get_settings().to_dict()


@app.put("/api/settings")
async def api_update_settings(request: Request):
    body = await request.json()
    s = get_settings()
    updates = {}
    for f in Settings.__dataclass_fields__.values():
        if f.name not in body:
            continue
        value = body[f.name]
        try:
            # Only ints are coerced; bool("false") and str(None) would pass silently
            if f.type != "int" and not isinstance(value, _SETTING_TYPES[f.type]):
                raise TypeError
            updates[f.name] = _SETTING_TYPES[f.type](value)
        except (TypeError, ValueError):
            raise HTTPException(400, f"Invalid value for {f.name}: {value!r}")
    if "default_difficulty" in updates:
        _check_difficulty(updates["default_difficulty"])
    for k, v in updates.items():
        setattr(s, k, v)
    save_settings(s)
    return s.to_dict()
