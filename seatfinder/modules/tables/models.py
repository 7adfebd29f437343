# Supabase tables reachable through the generic table browser
# This file documents the expected database schema
# The registry of browsable tables lives in seatfinder/config/tables_config.py

"""
Every browsable table has:
- id: uuid (primary key) - the mutation key for editable tables
- created_at: timestamp (default: now()) - except keep_alive_log (pinged_at)
  and incidents (started_at)

Columns ending in _at are timestamps; the browser formats them for display
only and exports them as stored.

Editable:   students, teachers, site_settings, incidents
Read-only:  search_logs, activity_logs, keep_alive_log, user_roles
"""
