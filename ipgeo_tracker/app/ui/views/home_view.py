from __future__ import annotations

import logging

from ipgeo_tracker.app.errors import ErrorKind
from ipgeo_tracker.app.geolocation_manager import GeolocationSessionManager, history_summary, map_embed_url
from ipgeo_tracker.app.navigation_shell import Navigator
from ipgeo_tracker.app.route_guard import LOGIN_PATH
from ipgeo_tracker.app.session_store import SessionStore
from ipgeo_tracker.app.ui.components.error_banner import ErrorBanner
from ipgeo_tracker.app.ui.table_printer import EMPTY_VALUE, format_table

logger = logging.getLogger(__name__)

HISTORY_COLUMNS: list[tuple[str, str]] = [
    ("row", "#"),
    ("selected", "sel"),
    ("id", "id"),
    ("address", "ip"),
    ("summary", "location"),
    ("searched_at", "searched at"),
]

COMMANDS_HELP = "Commands: s <ip> search | c clear | h <n> show row | t <id> toggle | d delete selected | r reload | o logout | q quit"


class HomeView:
    def __init__(self, manager: GeolocationSessionManager, session_store: SessionStore, navigator: Navigator) -> None:
        self.manager = manager
        self.session_store = session_store
        self.navigator = navigator
        self.notice: str | None = None

    def render(self) -> list[str]:
        lines = ["", "=== IP Geolocation Tracker ==="]
        user = self.session_store.user
        if user is not None:
            lines.append(f"Signed in as {user.username} ({user.email})")
        if self.manager.loading:
            lines.append("Loading...")

        record = self.manager.current
        if record is None:
            lines.append("No location loaded.")
        else:
            lines.append(f"IP: {record.address}")
            lines.append(f"City: {record.city or EMPTY_VALUE}")
            lines.append(f"Region: {record.region or EMPTY_VALUE}")
            lines.append(f"Country: {record.country or EMPTY_VALUE}")
            lines.append(f"Location: {record.loc or EMPTY_VALUE}")
            lines.append(f"Organization: {record.organization or EMPTY_VALUE}")
            lines.append(f"Timezone: {record.timezone or EMPTY_VALUE}")
            map_url = map_embed_url(record)
            if map_url:
                lines.append(f"Map: {map_url}")

        if self.manager.error is not None and self.manager.error.is_banner:
            lines.append(ErrorBanner.format(self.manager.error))
        if self.notice:
            lines.append(ErrorBanner.format(self.notice))

        rows = [
            {
                "row": index,
                "selected": "[x]" if entry.id in self.manager.selection else "[ ]",
                "id": entry.id,
                "address": entry.address,
                "summary": history_summary(entry),
                "searched_at": entry.searched_at.isoformat(timespec="seconds"),
            }
            for index, entry in enumerate(self.manager.history, start=1)
        ]
        lines.extend(format_table("Search history", rows, HISTORY_COLUMNS))
        if self.manager.selection:
            lines.append(f"{self.manager.selection.size()} selected")
        lines.append(COMMANDS_HELP)
        return lines

    def show(self) -> None:
        for line in self.render():
            print(line)

    async def handle_command(self, raw: str) -> bool:
        """Run one console command. Returns False when the user asked to quit."""
        self.notice = None
        command, _, argument = raw.strip().partition(" ")
        command = command.lower()
        argument = argument.strip()

        if command == "q":
            return False
        if command == "s":
            await self.manager.search(argument if argument else None)
        elif command == "c":
            await self.manager.clear()
        elif command == "h":
            self._replay_row(argument)
        elif command == "t":
            self._toggle(argument)
        elif command == "d":
            if not self.manager.selection:
                self.notice = "No history items selected"
            else:
                await self.manager.delete_selected()
        elif command == "r":
            await self.manager.load_history()
        elif command == "o":
            await self.logout()
        elif command:
            self.notice = f"Unknown command: {command}"

        error = self.manager.error
        if error is not None and error.kind == ErrorKind.UNAUTHENTICATED:
            await self._resolve_lost_session()
        return True

    async def logout(self) -> bool:
        result = await self.session_store.logout()
        if not result.success:
            logger.warning("logout_not_completed")
            return False
        await self.navigator.replace(LOGIN_PATH)
        return True

    async def _resolve_lost_session(self) -> None:
        self.manager.error = None
        await self.session_store.check_session()
        if self.session_store.user is None:
            logger.info("session_expired")
        self.navigator.render()

    def _replay_row(self, argument: str) -> None:
        try:
            index = int(argument)
        except ValueError:
            self.notice = "Usage: h <row number>"
            return
        if not 1 <= index <= len(self.manager.history):
            self.notice = f"No history row {index}"
            return
        self.manager.select_from_history(self.manager.history[index - 1])

    def _toggle(self, argument: str) -> None:
        try:
            entry_id = int(argument)
        except ValueError:
            self.notice = "Usage: t <history id>"
            return
        self.manager.toggle_selection(entry_id)
