from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field


class FeedbackCreate(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None
    is_anonymous: bool = False


class InternalFeedbackCreate(FeedbackCreate):
    event_id: int
    user_id: int


class Feedback(BaseModel):
    id: int
    event_id: int
    user_name: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    is_anonymous: bool
    created_at: datetime


class FeedbackStats(BaseModel):
    event_id: int
    average_rating: float
    total_reviews: int
    rating_distribution: Dict[int, int]
