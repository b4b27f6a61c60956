from pydantic import BaseModel
from typing import Optional


class FavoriteStatus(BaseModel):
    favorited: bool
    message: Optional[str] = None
