from fastapi import APIRouter, Depends, HTTPException
from soular.database.supabase_client import get_supabase
from soular.modules.subscription.schemas import (
    SubscribeRequest, PlanListResponse, CurrentSubscriptionResponse, SubscribeResponse
)
from soular.modules.subscription.service import SubscriptionService
from soular.core.dependencies import get_current_user, get_optional_user
from supabase import Client
from typing import Optional, Dict, Union

router = APIRouter(prefix="/subscription", tags=["subscription"])


def get_subscription_service(supabase: Client = Depends(get_supabase)) -> SubscriptionService:
    return SubscriptionService(supabase)


@router.get("", response_model=Union[PlanListResponse, CurrentSubscriptionResponse])
async def get_subscription(
    action: Optional[str] = None,
    user_data: Optional[Dict] = Depends(get_optional_user),
    service: SubscriptionService = Depends(get_subscription_service)
):
    """
    ?action=plans lists the active plans (public).
    Otherwise returns the caller's subscription and the subscription fields of their profile.
    """
    if action == "plans":
        return service.list_plans()
    if user_data is None:
        raise HTTPException(status_code=401, detail="Unauthorized", headers={"WWW-Authenticate": "Bearer"})
    return service.get_current(user_data["id"])


@router.post("", response_model=SubscribeResponse)
async def subscribe(
    request: SubscribeRequest,
    user_data: Dict = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service)
):
    return service.subscribe(user_data["id"], request)


@router.delete("")
async def cancel_subscription(
    user_data: Dict = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service)
):
    service.cancel(user_data["id"])
    return {
        "success": True,
        "message": "Subscription cancelled. You will retain access until the end of your billing period."
    }
