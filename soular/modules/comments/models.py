# Supabase tables: film_comments, film_comment_likes
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

film_comments:
- id: uuid (primary key)
- film_id: uuid (foreign key to films.id, on delete cascade)
- user_id: uuid (foreign key to profiles.id)
- comment: text (not null)
- rating: integer (nullable, 1..5)
- like_count: integer (default: 0, maintained by trigger)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

film_comment_likes:
- id: uuid (primary key)
- comment_id: uuid (foreign key to film_comments.id, on delete cascade)
- user_id: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())
- unique (comment_id, user_id)

RPC:
- get_film_comments(p_film_id, p_limit, p_offset) -> comments joined with username, user_avatar
- get_film_average_rating(p_film_id) -> numeric
"""
