"""Trainer API endpoints."""

import logging
import time
from typing import Annotated, Any

from fastapi import APIRouter, Header, HTTPException

from api.schemas import (
    ActionResponse,
    AddCardRequest,
    ExportResponse,
    ImportRequest,
    NoiseRequest,
    PreferencesResponse,
    SessionRequest,
    SessionResponse,
    SettingsPatch,
    SnapshotResponse,
    TargetRequest,
)
from api.session import create_session, extract_session_id, get_session, update_session
from config import config
from trainer.engine import EMPTY_UNDO, ActionResult, CountTrainer
from trainer.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()

# In-memory trainer cache (keeps the undo log; the session store keeps exported state)
_trainers: dict[str, CountTrainer] = {}

# Session data keys
SESSION_KEY_TRAINER = "trainer"
SESSION_KEY_CREATED_AT = "created_at"
SESSION_KEY_LAST_ACTIVITY = "last_activity"

SessionHeader = Annotated[str, Header(alias="X-Session-ID")]


def default_settings() -> Settings:
    """Settings for new sessions, from the environment."""
    trainer = config.trainer
    return Settings.from_dict(
        {
            "count_system": trainer.count_system,
            "decks_in_shoe": trainer.decks_in_shoe,
            "tray_decks_remaining": float(trainer.decks_in_shoe),
            "bankroll_units": trainer.bankroll_units,
            "kelly_cap_frac": trainer.kelly_cap_frac,
        }
    )


def _new_trainer(preferences: dict[str, Any] | None = None) -> CountTrainer:
    """Create a trainer seeded from configuration and optional preferences."""
    trainer = CountTrainer(
        defaults=default_settings(),
        log_limit=config.trainer.undo_log_limit,
    )
    if preferences:
        trainer.load_preferences(preferences)
    return trainer


async def _save_trainer(session_id: str, trainer: CountTrainer) -> None:
    """Save trainer state to the session store."""
    session_data = await get_session(session_id) or {}
    session_data[SESSION_KEY_TRAINER] = trainer.export_state()
    session_data[SESSION_KEY_LAST_ACTIVITY] = int(time.time())
    if SESSION_KEY_CREATED_AT not in session_data:
        session_data[SESSION_KEY_CREATED_AT] = int(time.time())
    await update_session(session_id, session_data)


async def _load_trainer(session_id: str) -> CountTrainer | None:
    """Restore a trainer from the session store."""
    session_data = await get_session(session_id)
    if not session_data or SESSION_KEY_TRAINER not in session_data:
        return None

    trainer = _new_trainer()
    result = trainer.import_state(session_data[SESSION_KEY_TRAINER])
    if not result.ok:
        logger.warning("Discarding unreadable session state: %s", result.message)
        return None
    return trainer


async def _get_trainer(session_id: str) -> CountTrainer:
    """Get or create the trainer for a signed session token."""
    if extract_session_id(session_id) is None:
        raise HTTPException(
            status_code=401,
            detail={"error": "invalid_session", "message": "Invalid or expired session"},
        )

    if session_id in _trainers:
        return _trainers[session_id]

    trainer = await _load_trainer(session_id)
    if trainer is None:
        trainer = _new_trainer()
        await _save_trainer(session_id, trainer)
    _trainers[session_id] = trainer
    return trainer


async def _respond(session_id: str, trainer: CountTrainer, result: ActionResult) -> ActionResponse:
    """Persist after an operation and build the response; failures answer 400."""
    if not result.ok and result.error != EMPTY_UNDO:
        raise HTTPException(
            status_code=400,
            detail={"error": result.error, "message": result.message},
        )
    if result.ok:
        await _save_trainer(session_id, trainer)
    return ActionResponse.build(result, trainer.snapshot())


@router.post("/session")
async def new_session(request: SessionRequest | None = None) -> SessionResponse:
    """Create a trainer session, optionally seeded with saved preferences."""
    session_id = await create_session()
    trainer = _new_trainer(request.preferences if request else None)
    _trainers[session_id] = trainer
    await _save_trainer(session_id, trainer)
    return SessionResponse(session_id=session_id)


@router.get("/snapshot")
async def get_snapshot(session_id: SessionHeader) -> SnapshotResponse:
    """Current counts, edge, bet and recommendation."""
    trainer = await _get_trainer(session_id)
    return SnapshotResponse.from_snapshot(trainer.snapshot())


@router.post("/cards")
async def add_card(request: AddCardRequest, session_id: SessionHeader) -> ActionResponse:
    """Report a card seen."""
    trainer = await _get_trainer(session_id)
    return await _respond(session_id, trainer, trainer.add_card(request.target, request.rank))


@router.post("/noise")
async def add_noise(session_id: SessionHeader, request: NoiseRequest | None = None) -> ActionResponse:
    """Count a random batch of unseen cards."""
    trainer = await _get_trainer(session_id)
    count = request.count if request else None
    return await _respond(session_id, trainer, trainer.add_noise(count))


@router.post("/target")
async def set_target(request: TargetRequest, session_id: SessionHeader) -> ActionResponse:
    """Select the default hand for new cards."""
    trainer = await _get_trainer(session_id)
    return await _respond(session_id, trainer, trainer.set_target(request.target))


@router.post("/undo")
async def undo(session_id: SessionHeader) -> ActionResponse:
    """Revert the last action; an empty log answers ok=false."""
    trainer = await _get_trainer(session_id)
    return await _respond(session_id, trainer, trainer.undo())


@router.post("/hand/clear")
async def clear_hand(session_id: SessionHeader) -> ActionResponse:
    """Clear the hands, keeping the count."""
    trainer = await _get_trainer(session_id)
    return await _respond(session_id, trainer, trainer.clear_hand())


@router.post("/shoe/reset")
async def reset_shoe(session_id: SessionHeader) -> ActionResponse:
    """Start a fresh shoe."""
    trainer = await _get_trainer(session_id)
    return await _respond(session_id, trainer, trainer.reset_shoe())


@router.patch("/settings")
async def update_settings(request: SettingsPatch, session_id: SessionHeader) -> ActionResponse:
    """Merge a partial settings update (values are clamped)."""
    trainer = await _get_trainer(session_id)
    return await _respond(session_id, trainer, trainer.set_settings(request.changes()))


@router.post("/preferences/reset")
async def reset_preferences(session_id: SessionHeader) -> ActionResponse:
    """Restore default settings."""
    trainer = await _get_trainer(session_id)
    return await _respond(session_id, trainer, trainer.reset_preferences())


@router.get("/preferences")
async def get_preferences(session_id: SessionHeader) -> PreferencesResponse:
    """Settings worth persisting between sessions."""
    trainer = await _get_trainer(session_id)
    return PreferencesResponse(preferences=trainer.preferences())


@router.get("/export")
async def export_state(session_id: SessionHeader) -> ExportResponse:
    """Export the full session as JSON text."""
    trainer = await _get_trainer(session_id)
    return ExportResponse(state=trainer.export_state())


@router.post("/import")
async def import_state(request: ImportRequest, session_id: SessionHeader) -> ActionResponse:
    """Restore an exported session; malformed state answers 400."""
    trainer = await _get_trainer(session_id)
    return await _respond(session_id, trainer, trainer.import_state(request.state))
