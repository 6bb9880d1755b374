"""Pydantic schemas for API requests and responses."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from trainer.engine import ActionResult, Snapshot


# Session schemas
class SessionRequest(BaseModel):
    """Optional preferences record to seed a new session."""

    preferences: dict[str, Any] | None = None


class SessionResponse(BaseModel):
    """A newly created session."""

    session_id: str


# Trainer requests
class AddCardRequest(BaseModel):
    """Report a card seen."""

    rank: str | int = Field(..., description="Rank such as 'A', '10', 'K' or 7")
    target: str | None = Field(
        default=None,
        description="player, dealer or table; omitted uses the current target",
    )


class NoiseRequest(BaseModel):
    """Count a batch of unseen cards."""

    count: int | None = Field(default=None, ge=1, le=52)


class TargetRequest(BaseModel):
    """Select the hand that receives cards reported without a target."""

    target: str


class SettingsPatch(BaseModel):
    """
    Partial settings update.

    Numeric values are clamped by the engine rather than rejected here, and
    camelCase names are accepted alongside snake_case.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    count_system: str | None = None
    decks_in_shoe: float | None = None
    tc_mode: Literal["computed", "tray-estimate"] | None = None
    tray_decks_remaining: float | None = None
    bankroll_units: float | None = None
    kelly_cap_frac: float | None = None
    min_bet_units: float | None = None
    dealer_hits_soft_17: bool | None = None
    double_after_split: bool | None = None
    late_surrender: bool | None = None
    ace_side_enabled: bool | None = None
    use_deviations: bool | None = None

    def changes(self) -> dict[str, Any]:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ImportRequest(BaseModel):
    """State text produced by the export endpoint."""

    state: str


# Trainer responses
class RecommendationResponse(BaseModel):
    """Recommended play."""

    action: str | None
    rationale: str
    deviation: bool
    insurance: bool


class SnapshotResponse(BaseModel):
    """Everything a renderer needs after an action."""

    running_count: float
    ace_correction: float
    true_count: float
    decks_seen: float
    decks_remaining: float
    penetration: float
    cards_dealt: int
    aces_seen: int
    edge_pct: float
    bet_units: int
    kelly_fraction: float
    band: Literal["NEGATIVE", "NEUTRAL", "POSITIVE", "HIGH"]
    recommendation: RecommendationResponse
    hands: dict[str, list[str]]
    target: str
    settings: dict[str, Any]
    undo_depth: int

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "SnapshotResponse":
        return cls.model_validate(snapshot.to_dict())


class ActionResponse(BaseModel):
    """Result of an operation with the resulting snapshot."""

    ok: bool
    error: str | None = None
    message: str = ""
    snapshot: SnapshotResponse

    @classmethod
    def build(cls, result: ActionResult, snapshot: Snapshot) -> "ActionResponse":
        return cls(
            ok=result.ok,
            error=result.error,
            message=result.message,
            snapshot=SnapshotResponse.from_snapshot(snapshot),
        )


class PreferencesResponse(BaseModel):
    """Settings worth persisting between sessions."""

    preferences: dict[str, Any]


class ExportResponse(BaseModel):
    """Exported session state."""

    state: str
