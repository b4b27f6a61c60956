# Supabase tables: moderation_logs, moderation_stats (view), profiles (ban/role columns)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

moderation_logs:
- id: uuid (primary key)
- moderator_id: uuid (foreign key to profiles.id)
- action_type: text - lock, unlock, pin, unpin, delete_discussion, delete_post,
  user_banned, user_unbanned, role_changed
- target_type: text - discussion, post, comment, user
- target_id: uuid
- reason: text (nullable)
- metadata: jsonb (nullable)
- created_at: timestamp (default: now())

Rows are written only through the RPC
log_moderation_action(p_moderator_id, p_action_type, p_target_type,
                      p_target_id, p_reason, p_metadata).

moderation_stats (view, single row):
- total_pin_actions, total_lock_actions, total_discussion_deletions,
  total_post_deletions, total_ban_actions, active_moderators,
  actions_last_24h, actions_last_7d: bigint

profiles moderation columns:
- role: text - user, curator, moderator, admin
- is_banned: boolean (default: false)
- ban_reason: text (nullable)
- ban_expires_at: timestamp (nullable) - null means permanent
"""
