"""Menu entry models shared by the store, the service and the API."""

from pydantic import BaseModel, field_validator


class MenuEntry(BaseModel):
    id: str
    dish: str
    who: str


class MenuEntryCreate(BaseModel):
    """Body of POST /api/menu. The id is assigned server-side."""

    dish: str
    who: str

    @field_validator("dish", "who")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v
