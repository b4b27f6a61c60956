# Supabase Storage buckets: films, posters, thumbnails, avatars, events
# This file documents the expected storage layout
# Actual operations are handled via Supabase SDK in bucket_storage.py

"""
Expected buckets (public read):
- films: video files, curator/admin upload
- posters: poster images, curator/admin upload
- thumbnails: film thumbnails, curator/admin upload
- events: event images, curator/admin upload
- avatars: profile pictures, any member; objects stored as <user_id>/<timestamp>.<ext>

Generic uploads are stored as <folder>/<timestamp>-<random>.<ext>
(or <timestamp>-<random>.<ext> when no folder is given).
"""
