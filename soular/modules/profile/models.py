# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key, references auth.users.id)
- username: text (unique, nullable)
- name: text (nullable)
- email: text (nullable)
- bio: text (nullable)
- avatar: text (nullable) - public URL in the avatars bucket
- role: text (default: 'user') - user | curator | moderator | admin
- is_premium: boolean (default: false)
- subscription_tier: text (default: 'free')
- subscription_status: text (default: 'active')
- subscription_expires_at: timestamp (nullable)
- is_banned: boolean (default: false)
- ban_reason: text (nullable)
- ban_expires_at: timestamp (nullable) - null with is_banned means permanent
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Rows are created by a trigger on auth.users insert.
"""
