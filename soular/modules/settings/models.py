# Supabase table: user_settings
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (unique, foreign key to profiles.id)
- email_notifications, email_on_reply, email_on_mention, email_on_like,
  email_on_event, email_on_moderation: boolean
- push_notifications, push_on_reply, push_on_mention, push_on_like,
  push_on_event, push_on_moderation: boolean
- show_email, show_activity, allow_mentions, allow_direct_messages: boolean
- theme: text (default: 'system') - light | dark | system
- language: text (default: 'id') - id | en
- posts_per_page: integer (default: 20, 10..100)
- email_digest: text (default: 'weekly') - never | daily | weekly
- digest_day: integer (default: 0, 0 = Sunday .. 6 = Saturday)
- created_at: timestamp (default: now())
- updated_at: timestamp (maintained by trigger)

Column defaults fill a new row; GET creates one on first access.
"""
