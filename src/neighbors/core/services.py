"""Process-wide collaborator handles.

The OpenAI and Supabase clients are created once at application startup,
bundled in :class:`Services`, and shared read-only by every request.  No
teardown is needed beyond normal process exit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import openai
from supabase import create_client

from neighbors.core.config import NeighborsConfig
from neighbors.core.image_client import ImageGenerator, OpenAIImageGenerator
from neighbors.core.records import RecordStore, SupabaseRecordStore
from neighbors.core.storage import ObjectStore, SupabaseObjectStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Services:
    images: ImageGenerator
    objects: ObjectStore
    records: RecordStore


def build_services(config: NeighborsConfig) -> Services:
    """Create the production collaborators from configuration."""
    openai_client = openai.OpenAI(api_key=config.openai_api_key.get_secret_value())
    supabase_client = create_client(
        config.supabase_url,
        config.supabase_service_role_key.get_secret_value(),
    )
    logger.info(
        f"Clients initialised (model={config.openai_image_model}, "
        f"bucket={config.storage_bucket}, table={config.members_table})"
    )
    return Services(
        images=OpenAIImageGenerator(openai_client, config.openai_image_model),
        objects=SupabaseObjectStore(supabase_client, config.storage_bucket),
        records=SupabaseRecordStore(supabase_client, config.members_table),
    )
