# Supabase tables: events, event_registrations
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

events:
- id: uuid (primary key)
- title: text (not null)
- slug: text (nullable)
- description: text (nullable)
- event_date: timestamp (not null)
- location: text (nullable)
- host_id: uuid (foreign key to profiles.id) - the organizer
- max_participants: integer (nullable) - null means unlimited
- image_url: text (nullable)
- tags: text[] (default: '{}')
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

event_registrations:
- id: uuid (primary key)
- event_id: uuid (foreign key to events.id, on delete cascade)
- user_id: uuid (foreign key to profiles.id)
- status: text (default: 'confirmed') - confirmed | waitlist | cancelled
- registered_at: timestamp (default: now())
- unique (event_id, user_id)

Capacity: an event is full when the number of confirmed registrations
reaches max_participants. Further registrations are stored as waitlist
and promoted oldest-first when a confirmed seat frees up.
"""
