from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

Mode = Literal["generate_openers", "followup_nudge", "event_digest_copy", "guest_view_copy"]
EventCategory = Literal["mixer", "career_fair", "conference", "class", "social"]
Stage = Literal["icebreaker", "warm", "deep"]
TemporalFocus = Literal["present", "near_future"]
VulnerabilityLevel = Literal["low", "med", "high"]
QuestionLevel = Literal["discovery", "bridge", "catalyst"]
QuestionStyle = Literal["soft_curiosity", "shared_interest", "opportunity_probe", "playful_personal"]


class Profile(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str | None = None
    role: str | None = None
    company: str | None = None
    school: str | None = None
    interests: tuple[str, ...] = ()
    goals_next_period: tuple[str, ...] = ()
    recent_win: str | None = None
    help_offers: tuple[str, ...] = ()


class Context(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    event_label: str | None = None
    event_category: EventCategory | None = None
    noise_level: int = Field(default=0, ge=0, le=3)
    time_budget_minutes: int = Field(default=15, gt=0)
    conversation_stage: Stage = "icebreaker"
    city: str | None = None


class Preferences(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    allow_playful: bool = True
    include_favorites: bool = True
    temporal_focus: TemporalFocus = "present"
    vulnerability_level: VulnerabilityLevel = "low"


class NotesContext(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    my_note_about_them: str | None = None
    overlaps_detected: tuple[str, ...] = ()


class OverlapSummary(BaseModel):
    model_config = ConfigDict(extra="ignore")

    detected_commonalities: list[str] = Field(default_factory=list)
    detected_complements: list[str] = Field(default_factory=list)
    context_notes: str = ""

    @property
    def commonalities(self) -> list[str]:
        return self.detected_commonalities

    @property
    def complements(self) -> list[str]:
        return self.detected_complements


class QuestionFlags(BaseModel):
    model_config = ConfigDict(extra="ignore")

    loud_safe: bool = True
    time_safe: bool = True
    boundary_ok: bool = True


class Question(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    level: QuestionLevel
    style: QuestionStyle
    text: str
    rationale: str = Field(default="", validation_alias=AliasChoices("rationale", "why_it_works"))
    follow_up: str = ""
    flags: QuestionFlags = Field(default_factory=QuestionFlags)

    @field_validator("level", mode="before")
    @classmethod
    def _strip_level_prefix(cls, value: Any) -> Any:
        # Accept the ladder spelling "L1_discovery" / "L2_bridge" / "L3_catalyst".
        if isinstance(value, str):
            value = value.strip().lower()
            if len(value) > 3 and value[0] == "l" and value[1].isdigit() and value[2] == "_":
                value = value[3:]
        return value

    @field_validator("style", mode="before")
    @classmethod
    def _lower_style(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("text", "rationale", "follow_up", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value


class QuestionSet(BaseModel):
    model_config = ConfigDict(extra="ignore")

    summary: OverlapSummary = Field(default_factory=OverlapSummary)
    questions: list[Question] = Field(default_factory=list)
    top_picks: list[int] = Field(default_factory=list)


class GenerateRequest(BaseModel):
    # Profiles and context stay loosely typed here; the normalizer is the boundary.
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    mode: Mode = "generate_openers"
    context: dict[str, Any] = Field(default_factory=dict)
    you: dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("you", "self_profile")
    )
    other: dict[str, Any] | None = Field(
        default=None, validation_alias=AliasChoices("other", "other_profile")
    )
    prefs: dict[str, Any] | None = Field(
        default=None, validation_alias=AliasChoices("prefs", "preferences")
    )
    notes_context: dict[str, Any] | None = None


class LegacyQuestion(BaseModel):
    text: str
    category: Literal["opportunity", "fun", "interests", "project"]
    depth: int
    follow_up: str
    rationale: str
    research_tags: list[str] = Field(default_factory=list)


class LegacyGenerateResponse(BaseModel):
    questions: list[LegacyQuestion] = Field(default_factory=list)
    ping_result: QuestionSet
