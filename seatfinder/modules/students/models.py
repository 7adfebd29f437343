# Supabase table: students
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
students:
- id: uuid (primary key)
- roll_number: text (not null)
- name: text (not null)
- institution: text (not null) - exam centre
- building: text
- room: text
- floor: text
- report_time: text - e.g. "09:30 AM"
- start_time: text
- end_time: text
- directions: text
- map_url: text - Google Maps link, coordinates parsed for the seat view
- exam_date: date (nullable, defaults to today when missing)
- unit: text (nullable, defaults to "UNIT-A" when missing)
- created_at: timestamp (default: now())
"""
