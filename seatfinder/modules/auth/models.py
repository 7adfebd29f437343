# Supabase tables: auth.users, user_roles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Supabase Auth provides:
- auth.sign_in_with_password() - Authenticate admins
- auth.get_user() - Resolve the current user from a JWT token
- auth.sign_out() - Logout
- auth.admin.* - Create users and change passwords (service role key only)

user_roles:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null)
- role: text (not null) - "admin" or "super_admin"
- created_at: timestamp (default: now())
- unique constraint on (user_id, role)

A user holding any user_roles row is an admin for UI gating. Elevated SQL
execution additionally requires the role to be admin or super_admin.
"""
