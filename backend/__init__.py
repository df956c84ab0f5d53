"""
Time Bank Portal - REST API over the Supabase time bank database.

Provides the FastAPI backend used by the portal frontend: admin and
collaborator login, hour posting, leave and access-code requests,
notifications and reports.
"""
