# Supabase tables: collections, film_collections
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

collections:
- id: uuid (primary key)
- title: text (not null)
- slug: text (unique, not null)
- description: text (nullable)
- icon: text (nullable)
- color: text (nullable)
- film_count: integer (default: 0, maintained by trigger)
- is_published: boolean (default: true)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

film_collections:
- id: uuid (primary key)
- collection_id: uuid (foreign key to collections.id, on delete cascade)
- film_id: uuid (foreign key to films.id, on delete cascade)
- display_order: integer (default: 0)
- created_at: timestamp (default: now())
- unique (collection_id, film_id)
"""
