from typing import Optional
from supabase import create_client, Client
from routebuilder.core.config import settings
from routebuilder.core.exceptions import CatalogUnavailable
from routebuilder.utils.logger import get_logger

logger = get_logger(__name__)

supabase: Optional[Client] = None


def init_supabase() -> Optional[Client]:
    global supabase
    if settings.SUPABASE_URL and settings.SUPABASE_KEY:
        try:
            supabase = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
            logger.info("Supabase client initialized successfully")
            return supabase
        except Exception as e:
            logger.error(f"Failed to initialize Supabase: {e}")
            return None
    else:
        logger.warning("SUPABASE_URL or SUPABASE_KEY not set")
        return None


def get_supabase() -> Client:
    # Connect on first use so the engine runs without credentials
    if supabase is None and init_supabase() is None:
        raise CatalogUnavailable("Supabase not connected")
    return supabase
