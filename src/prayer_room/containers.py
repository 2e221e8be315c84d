"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from prayer_room.adapters.supabase_prayer_repository import SupabasePrayerRepository
from prayer_room.config import Settings
from prayer_room.services.browsing import BrowsingSession
from prayer_room.services.prayers import PrayerRepository
from prayer_room.services.registry import InMemoryRegistry
from prayer_room.services.submission import SubmissionWorkflow
from prayer_room.services.tally import TallyStoreDirectory


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    prayer_repository: PrayerRepository
    tally_stores: TallyStoreDirectory
    submissions: InMemoryRegistry
    rooms: InMemoryRegistry

    def new_submission(self) -> SubmissionWorkflow:
        """Create a submission workflow in the editing state."""
        return SubmissionWorkflow(self.prayer_repository)

    def new_room(self, device_id: str) -> BrowsingSession:
        """Create a browsing session bound to a device's tally store."""
        return BrowsingSession(
            repository=self.prayer_repository,
            tally_store=self.tally_stores.for_device(device_id),
            key_prefix=self.settings.tally_key_prefix,
        )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_anon_key
    )
    prayer_repository = SupabasePrayerRepository(
        supabase_client, table_name=resolved_settings.prayers_table
    )
    return AppContainer(
        settings=resolved_settings,
        prayer_repository=prayer_repository,
        tally_stores=TallyStoreDirectory(),
        submissions=InMemoryRegistry(resolved_settings.workflow_ttl_seconds),
        rooms=InMemoryRegistry(resolved_settings.workflow_ttl_seconds),
    )
