# Supabase table: teachers
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
teachers:
- id: uuid (primary key)
- teacher_id: text (not null) - staff identifier used for lookup
- name: text (not null)
- department: text
- designation: text
- phone: text
- email: text
- office_room: text
- created_at: timestamp (default: now())
"""
