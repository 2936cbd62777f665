# studio/schemas/theme.py
from typing import Literal

from pydantic import BaseModel


class Theme(BaseModel):
    mode: Literal["light", "dark"] = "light"
    primary_color: str = "#3b82f6"
    secondary_color: str = "#64748b"
    background_color: str = "#ffffff"
    text_color: str = "#1f2937"
    grid_color: str = "#e5e7eb"
