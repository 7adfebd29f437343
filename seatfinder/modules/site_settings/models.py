# Supabase table: site_settings
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
site_settings:
- id: uuid (primary key)
- key: text (unique, not null) - e.g. "site_title", "exam_notice"
- value: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp
"""
