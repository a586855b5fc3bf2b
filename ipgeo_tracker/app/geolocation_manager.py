from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from decimal import Decimal

from pydantic import ValidationError as PydanticValidationError

from clients.ipgeo_sdk.errors import ApiError
from clients.ipgeo_sdk.history_client import HistoryClient
from clients.ipgeo_sdk.lookup_client import LookupClient
from clients.ipgeo_sdk.models import GeoRecord, HistoryCreate, HistoryEntry

from ipgeo_tracker.app.errors import AppError, from_api_error
from ipgeo_tracker.app.infrastructure.logging.logger import log_action
from ipgeo_tracker.app.selection import HistorySelection

logger = logging.getLogger(__name__)

IPV4_REGEX = re.compile(
    r"(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
    r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)"
)

EMPTY_ADDRESS = "Please enter an IP address"
INVALID_ADDRESS = "Invalid IP address format. Please enter a valid IPv4 address."
LOOKUP_MISS = "Unable to find geolocation data for this IP address"
LOOKUP_FAILED = "Failed to fetch geolocation data"
OWN_LOCATION_FAILED = "Failed to load your geolocation data"
DELETE_FAILED = "Failed to delete history items"


MAP_EMBED_URL = "https://www.openstreetmap.org/export/embed.html"
MAP_SPAN = Decimal("0.1")


def validate_address(value: str | None) -> bool:
    if not value:
        return False
    return IPV4_REGEX.fullmatch(value) is not None


def map_embed_url(record: GeoRecord | None) -> str | None:
    if record is None or record.coordinates is None:
        return None
    latitude, longitude = record.coordinates
    bbox = ",".join(
        str(value)
        for value in (longitude - MAP_SPAN, latitude - MAP_SPAN, longitude + MAP_SPAN, latitude + MAP_SPAN)
    )
    return f"{MAP_EMBED_URL}?bbox={bbox}&layer=mapnik&marker={latitude},{longitude}"


def history_summary(entry: HistoryEntry) -> str:
    return ", ".join(part for part in (entry.city, entry.region, entry.country) if part)


class GeolocationSessionManager:
    """Current location, search history and selection for the home screen.

    The history list is a read-through cache of the server: it is replaced by
    a reload after every create or delete, never patched in place.

    Responses are applied last-initiated-wins: every operation that writes
    ``current`` (or ``history``) takes a ticket, and a response holding an
    older ticket than the newest one issued is dropped.
    """

    def __init__(
        self,
        lookup_client: LookupClient,
        history_client: HistoryClient,
        selection: HistorySelection | None = None,
        user_id: int | None = None,
    ) -> None:
        self.lookup_client = lookup_client
        self.history_client = history_client
        self.selection = selection or HistorySelection()
        self.user_id = user_id
        self.current: GeoRecord | None = None
        self.address_input = ""
        self.own_address = ""
        self.history: list[HistoryEntry] = []
        self.error: AppError | None = None
        self._in_flight = 0
        self._display_version = 0
        self._history_version = 0

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @staticmethod
    def validate_address(value: str | None) -> bool:
        return validate_address(value)

    async def open(self) -> None:
        await self.load_own_location()
        await self.load_history()

    async def load_own_location(self) -> None:
        ticket = self._next_display_ticket()
        self._in_flight += 1
        try:
            response = await self.lookup_client.lookup()
        except (ApiError, PydanticValidationError) as error:
            logger.warning("own_location_failed", extra={"reason": str(error)})
            if self._is_current_display(ticket):
                self.error = from_api_error(error, OWN_LOCATION_FAILED)
            return
        finally:
            self._in_flight -= 1

        if not self._is_current_display(ticket):
            logger.debug("own_location_discarded_stale")
            return
        if response.is_miss:
            self.error = AppError.remote_failure(OWN_LOCATION_FAILED)
            return
        self.current = GeoRecord.from_lookup(response)
        self.own_address = response.ip
        self.error = None

    async def load_history(self) -> None:
        ticket = self._next_history_ticket()
        try:
            entries = await self.history_client.list()
        except (ApiError, PydanticValidationError) as error:
            logger.warning("history_load_failed", extra={"reason": str(error)})
            return
        if ticket != self._history_version:
            logger.debug("history_reload_discarded_stale")
            return
        self.history = entries

    async def search(self, value: str | None = None) -> bool:
        address = self.address_input if value is None else value
        self.address_input = address
        self.error = None

        if not address.strip():
            self.error = AppError.validation(EMPTY_ADDRESS)
            return False
        if not validate_address(address):
            self.error = AppError.validation(INVALID_ADDRESS)
            return False

        ticket = self._next_display_ticket()
        self._in_flight += 1
        try:
            return await self._lookup_and_persist(address, ticket)
        finally:
            self._in_flight -= 1

    async def _lookup_and_persist(self, address: str, ticket: int) -> bool:
        try:
            response = await self.lookup_client.lookup(address)
        except (ApiError, PydanticValidationError) as error:
            logger.warning("lookup_failed", extra={"address": address, "reason": str(error)})
            if self._is_current_display(ticket):
                self.error = from_api_error(error, LOOKUP_FAILED)
            log_action(logger, "geolocation", "search", self.user_id, "error", level=logging.WARNING)
            return False

        if response.is_miss:
            if self._is_current_display(ticket):
                self.error = AppError.lookup_miss(LOOKUP_MISS)
            log_action(logger, "geolocation", "search", self.user_id, "lookup_miss")
            return False

        record = GeoRecord.from_lookup(response)
        if self._is_current_display(ticket):
            self.current = record
        else:
            logger.debug("lookup_display_discarded_stale", extra={"address": address})

        try:
            await self.history_client.create(HistoryCreate.from_record(record))
        except ApiError as error:
            # the looked-up record stays on screen; history is left as it was
            logger.warning(
                "history_persist_failed",
                extra={"address": record.address, "code": error.code, "trace_id": error.trace_id},
            )
            log_action(logger, "history", "create", self.user_id, "error", trace_id=error.trace_id, level=logging.WARNING)
            return True

        await self.load_history()
        log_action(logger, "geolocation", "search", self.user_id, "success")
        return True

    async def clear(self) -> None:
        self.address_input = ""
        await self.load_own_location()

    def select_from_history(self, entry: HistoryEntry) -> GeoRecord:
        self._next_display_ticket()
        self.address_input = entry.address
        self.current = GeoRecord.from_history(entry)
        return self.current

    def toggle_selection(self, entry_id: int) -> bool:
        return self.selection.toggle(entry_id)

    async def delete_selected(self, ids: Iterable[int] | None = None) -> bool:
        target = sorted(set(ids)) if ids is not None else self.selection.ids()
        if not target:
            return False

        try:
            await self.history_client.bulk_delete(target)
        except ApiError as error:
            self.error = from_api_error(error, DELETE_FAILED, session_call=True)
            log_action(logger, "history", "bulk_delete", self.user_id, "error", trace_id=error.trace_id, level=logging.WARNING)
            return False

        self.selection.clear()
        await self.load_history()
        log_action(logger, "history", "bulk_delete", self.user_id, "success")
        return True

    def selected_entries(self) -> list[HistoryEntry]:
        return [entry for entry in self.history if entry.id in self.selection]

    def _next_display_ticket(self) -> int:
        self._display_version += 1
        return self._display_version

    def _is_current_display(self, ticket: int) -> bool:
        return ticket == self._display_version

    def _next_history_ticket(self) -> int:
        self._history_version += 1
        return self._history_version
