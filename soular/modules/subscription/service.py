from supabase import Client
from soular.config.content_config import BILLING_CYCLES
from soular.core.utils import row_or_none, rows, utc_now
from soular.modules.subscription.schemas import (
    SubscribeRequest, PlanListResponse, ProfileSubscription, CurrentSubscriptionResponse,
    SubscriptionSummary, SubscribeResponse
)
from datetime import datetime
from fastapi import HTTPException
import calendar
import logging

logger = logging.getLogger(__name__)

PAYMENT_CURRENCY = "USD"


def add_months(start: datetime, months: int) -> datetime:
    """Same day-of-month `months` later, clamped to the last day of the target month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def period_end(start: datetime, billing_cycle: str) -> datetime:
    return add_months(start, 12 if billing_cycle == "yearly" else 1)


class SubscriptionService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_plans(self) -> PlanListResponse:
        try:
            result = self.supabase.table("subscription_plans")\
                .select("*")\
                .eq("is_active", True)\
                .order("sort_order")\
                .execute()
            return PlanListResponse(plans=rows(result))
        except Exception as e:
            logger.error(f"Error fetching subscription plans: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch subscription plans")

    def get_current(self, user_id: str) -> CurrentSubscriptionResponse:
        try:
            subscription = row_or_none(
                self.supabase.rpc("get_user_subscription", {"p_user_id": user_id}).execute()
            )
        except Exception as e:
            logger.error(f"Error fetching subscription for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch subscription")

        try:
            profile = row_or_none(
                self.supabase.table("profiles")
                .select("subscription_plan, subscription_status, subscription_ends_at")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.warning(f"Error fetching subscription profile fields for {user_id}: {e}")
            profile = None

        return CurrentSubscriptionResponse(
            subscription=subscription,
            profile=ProfileSubscription(**profile) if profile else ProfileSubscription()
        )

    def subscribe(self, user_id: str, request: SubscribeRequest) -> SubscribeResponse:
        """
        Activate plan_name for the caller.
        Upserts the user_subscriptions row for one billing period and records
        a completed payment transaction.
        """
        if not request.plan_name or not request.billing_cycle:
            raise HTTPException(status_code=400, detail="Plan name and billing cycle are required")
        if request.billing_cycle not in BILLING_CYCLES:
            raise HTTPException(status_code=400, detail="Billing cycle must be monthly or yearly")

        try:
            plan = row_or_none(
                self.supabase.table("subscription_plans")
                .select("*")
                .eq("name", request.plan_name)
                .eq("is_active", True)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching plan {request.plan_name}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch subscription plan")
        if not plan:
            raise HTTPException(status_code=404, detail="Invalid subscription plan")

        now = utc_now()
        ends_at = period_end(now, request.billing_cycle)
        period = {
            "plan_id": plan["id"],
            "status": "active",
            "billing_cycle": request.billing_cycle,
            "current_period_start": now.isoformat(),
            "current_period_end": ends_at.isoformat(),
            "cancel_at_period_end": False,
            "cancelled_at": None,
        }

        try:
            existing = row_or_none(
                self.supabase.table("user_subscriptions")
                .select("id")
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
            if existing:
                self.supabase.table("user_subscriptions").update(period).eq("user_id", user_id).execute()
            else:
                self.supabase.table("user_subscriptions").insert({"user_id": user_id, **period}).execute()
        except Exception as e:
            logger.error(f"Error saving subscription for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update subscription")

        amount = plan.get("price_monthly") if request.billing_cycle == "monthly" else plan.get("price_yearly")
        try:
            self.supabase.table("payment_transactions").insert({
                "user_id": user_id,
                "plan_id": plan["id"],
                "amount": amount,
                "currency": PAYMENT_CURRENCY,
                "status": "completed",
                "payment_method": "demo",
                "payment_provider": "stripe",
                "metadata": {"plan_name": plan.get("name"), "billing_cycle": request.billing_cycle},
            }).execute()
        except Exception as e:
            logger.warning(f"Subscription for {user_id} saved but payment record failed: {e}")

        logger.info(f"User {user_id} subscribed to {plan.get('name')} ({request.billing_cycle})")
        return SubscribeResponse(
            success=True,
            message="Subscription activated successfully",
            subscription=SubscriptionSummary(
                plan=plan.get("name") or request.plan_name,
                billing_cycle=request.billing_cycle,
                period_end=ends_at
            )
        )

    def cancel(self, user_id: str) -> bool:
        try:
            result = self.supabase.rpc("cancel_subscription", {"p_user_id": user_id}).execute()
        except Exception as e:
            logger.error(f"Error cancelling subscription for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to cancel subscription")
        if not getattr(result, "data", None):
            raise HTTPException(status_code=404, detail="No active subscription found")
        return True
