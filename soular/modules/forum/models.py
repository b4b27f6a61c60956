# Supabase tables: forum_discussions, forum_posts, forum_discussion_likes
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

forum_discussions:
- id: uuid (primary key)
- author_id: uuid (foreign key to profiles.id, constraint forum_discussions_author_id_fkey)
- title: text (not null, <= 200 chars)
- content: text (not null, <= 10000 chars)
- category: text (not null) - one of FORUM_CATEGORIES
- tags: text[] (default: '{}', <= 5 lower-case entries)
- is_pinned: boolean (default: false)
- is_locked: boolean (default: false)
- view_count: integer (default: 0)
- reply_count: integer (default: 0, never negative)
- last_activity_at: timestamp (default: now())
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

forum_posts:
- id: uuid (primary key)
- discussion_id: uuid (foreign key to forum_discussions.id, on delete cascade)
- author_id: uuid (foreign key to profiles.id, constraint forum_posts_author_id_fkey)
- content: text (not null, <= 5000 chars)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

forum_discussion_likes:
- id: uuid (primary key)
- discussion_id: uuid (foreign key to forum_discussions.id, on delete cascade)
- user_id: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())
- unique (discussion_id, user_id)

RPC: increment_discussion_views(p_discussion_id uuid) -> void
"""
