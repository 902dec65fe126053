from pydantic import Field
from calcvault.shared.schemas import CamelModel, CamelORMModel

class SettingsCreate(CamelModel):
    user_id: int
    theme: str = Field(default="light", pattern="^(light|dark)$")
    language: str = Field(default="en", pattern="^(en|ar)$")
    is_premium: bool = False

class SettingsUpdate(CamelModel):
    theme: str | None = Field(default=None, pattern="^(light|dark)$")
    language: str | None = Field(default=None, pattern="^(en|ar)$")
    is_premium: bool | None = None

class SettingsOut(CamelORMModel):
    id: int
    user_id: int
    theme: str
    language: str
    is_premium: bool
