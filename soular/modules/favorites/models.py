# Supabase table: user_favorites
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id)
- film_id: uuid (foreign key to films.id, on delete cascade)
- created_at: timestamp (default: now())
- unique (user_id, film_id)

RPC: get_user_favorites(user_uuid uuid) -> favourited films with favorited_at, newest first
"""
