# Supabase table: films
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- title: text (not null)
- slug: text (unique, not null)
- description: text (nullable)
- director: text (not null)
- year: integer
- duration: integer (minutes, default: 0)
- category: text (not null) - one of FILM_CATEGORIES
- youtube_url: text (not null)
- thumbnail: text (nullable)
- is_premium: boolean (default: false)
- is_published: boolean (default: true)
- view_count: integer (default: 0)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

RPC: increment_film_views(p_film_id uuid) -> void
"""
