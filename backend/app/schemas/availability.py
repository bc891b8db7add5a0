from pydantic import BaseModel


class AvailableWindow(BaseModel):
    start: str
    end: str
