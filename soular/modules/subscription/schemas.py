from pydantic import BaseModel
from typing import Optional, List, Dict, Any
from datetime import datetime


class SubscribeRequest(BaseModel):
    plan_name: Optional[str] = None
    billing_cycle: Optional[str] = None


class PlanListResponse(BaseModel):
    plans: List[Dict[str, Any]]


class ProfileSubscription(BaseModel):
    subscription_plan: Optional[str] = "free"
    subscription_status: Optional[str] = "active"
    subscription_ends_at: Optional[datetime] = None


class CurrentSubscriptionResponse(BaseModel):
    subscription: Optional[Dict[str, Any]] = None
    profile: ProfileSubscription


class SubscriptionSummary(BaseModel):
    plan: str
    billing_cycle: str
    period_end: datetime


class SubscribeResponse(BaseModel):
    success: bool
    message: str
    subscription: SubscriptionSummary
