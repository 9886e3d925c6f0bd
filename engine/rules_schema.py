"""Validation schema for Landlord rules configuration."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .deck import DECK_SIZE


class RuleSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    players: int = Field(3, ge=3, le=3, description="Landlord is played by exactly three players.")
    hand_size: int = Field(17, ge=1, description="Cards dealt to each player before the auction.")
    kitty_size: int = Field(3, ge=0, description="Cards left over for the landlord.")
    max_bid: int = Field(3, ge=1, description="Highest bid; bidding it wins the auction outright.")
    landlord_multiplier: int = Field(2, ge=1, description="Landlord wins or loses this many times the bid.")
    double_on_bomb: bool = Field(True, description="Double the landlord's bid whenever a bomb or rocket is played.")
    max_rounds: Optional[int] = Field(
        None,
        ge=1,
        description="Stop the match after this many completed rounds; unlimited when unset.",
    )

    @model_validator(mode="after")
    def check_deck_is_used(self) -> "RuleSet":
        dealt = self.players * self.hand_size + self.kitty_size
        if dealt != DECK_SIZE:
            raise ValueError(f"Hands and kitty must use all {DECK_SIZE} cards, got {dealt}.")
        return self


DEFAULT_RULES = RuleSet()
