# Supabase tables: subscription_plans, user_subscriptions, payment_transactions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

subscription_plans:
- id: uuid (primary key)
- name: text (unique) - e.g. free, premium, pro
- display_name: text
- price_monthly: numeric
- price_yearly: numeric
- features: jsonb
- is_active: boolean (default: true)
- sort_order: integer

user_subscriptions:
- id: uuid (primary key)
- user_id: uuid (unique, foreign key to profiles.id)
- plan_id: uuid (foreign key to subscription_plans.id)
- status: text - active | cancelled | expired
- billing_cycle: text - monthly | yearly
- current_period_start: timestamp
- current_period_end: timestamp
- cancel_at_period_end: boolean (default: false)
- cancelled_at: timestamp (nullable)

payment_transactions:
- id: uuid (primary key)
- user_id: uuid
- plan_id: uuid
- amount: numeric
- currency: text
- status: text - pending | completed | failed
- payment_method: text
- payment_provider: text
- metadata: jsonb
- created_at: timestamp (default: now())

profiles carries subscription_plan, subscription_status and
subscription_ends_at, kept in sync by a trigger on user_subscriptions.

RPC:
- get_user_subscription(p_user_id) -> rows of the active subscription joined with its plan
- cancel_subscription(p_user_id) -> boolean (false when there is nothing to cancel)
"""
