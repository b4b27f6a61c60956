# Supabase table: notifications
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, not null) - recipient
- actor_id: uuid (foreign key to profiles.id, nullable) - who triggered it
- type: text (not null) - e.g. forum_reply, event_promoted, moderation
- title: text (not null)
- message: text (nullable)
- link_url: text (nullable)
- is_read: boolean (default: false)
- created_at: timestamp (default: now())

RLS: recipients can select/update/delete their own rows.
"""
