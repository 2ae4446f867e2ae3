from pydantic import BaseModel
from typing import Literal

Priority = Literal["high", "medium", "low"]

class Task(BaseModel):
    title: str
    priority: Priority = "medium"
    notes: str = ""
