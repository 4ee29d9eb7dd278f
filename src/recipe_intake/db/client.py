"""
Recipe Intake - Supabase Client.

Low-level database and storage access. The pipeline uses the service-role
client because jobs keep running after the creating request has ended.
"""

from supabase import Client, create_client

from recipe_intake.config import settings

# Singleton client instance
_client: Client | None = None


def get_service_client() -> Client:
    """
    Get the service-role Supabase client.

    Uses singleton pattern to reuse connection.

    Raises:
        RuntimeError: If Supabase is not configured
    """
    global _client

    if _client is None:
        if not settings.supabase_configured:
            raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
        _client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _client
