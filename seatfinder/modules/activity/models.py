# Supabase table: activity_logs
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
activity_logs:
- id: uuid (primary key)
- user_id: uuid (the admin who made the change, nullable)
- action: text (not null) - INSERT | UPDATE | DELETE
- entity_type: text (not null) - e.g. "student", "teacher", "site_setting", "admin_role"
- entity_id: text (nullable)
- details: text (nullable) - human-readable description
- created_at: timestamp (default: now())

Append-only: the application never updates or deletes single entries. The
danger-zone action can empty the whole table.
"""
