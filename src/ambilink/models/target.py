"""Static description of a lighting target."""

from pydantic import BaseModel, ConfigDict, Field

from .enums import ContentEffect, TargetId, TransportKind


class TargetInfo(BaseModel):
    """Identity and capabilities of a target, fixed for the process lifetime."""

    model_config = ConfigDict(frozen=True)

    target: TargetId
    transport_kind: TransportKind
    supported_effects: frozenset[ContentEffect] = Field(default_factory=frozenset)
    allow_delay: bool = Field(
        default=False, description="Whether the target tolerates queued/delayed commands"
    )

    def supports(self, effect: ContentEffect) -> bool:
        return effect in self.supported_effects
