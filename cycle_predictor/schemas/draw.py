"""Pydantic schemas for draw records."""

from pydantic import AliasChoices, BaseModel, Field, field_validator


class DrawRecordSchema(BaseModel):
    """One completed cycle's outcome, as read from a source or the store.

    Sources send camelCase keys; output is always snake_case.
    """

    model_config = {"from_attributes": True, "frozen": True}

    draw_id: str = Field(validation_alias=AliasChoices("draw_id", "drawId"))
    numbers: list[str]
    draw_time: str = Field(default="", validation_alias=AliasChoices("draw_time", "drawTime"))

    @field_validator("draw_id", mode="before")
    @classmethod
    def _check_draw_id(cls, v) -> str:
        v = str(v).strip()
        if not v.isdigit():
            raise ValueError(f"draw id must be a decimal string: {v!r}")
        return v

    @field_validator("numbers", mode="before")
    @classmethod
    def _check_numbers(cls, v) -> list[str]:
        digits = [str(n).strip() for n in v]
        for d in digits:
            if len(d) != 1 or not d.isdigit():
                raise ValueError(f"slot value must be a single digit: {d!r}")
        return digits

    @property
    def draw_number(self) -> int:
        return int(self.draw_id)

    def digit(self, slot: int) -> int:
        return int(self.numbers[slot])


class PaginatedDrawResponse(BaseModel):
    items: list[DrawRecordSchema]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_more: bool
