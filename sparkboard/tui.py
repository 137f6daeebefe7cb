"""Textual TUI for browsing boards and sharing sparks to the community feed."""
from __future__ import annotations

from typing import TYPE_CHECKING

from dotenv import load_dotenv
from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Center, Middle, Horizontal
from textual.css.query import NoMatches
from textual.screen import Screen
from textual.widgets import (
    Header, Footer, OptionList, Label, Input,
    Button, LoadingIndicator
)
from textual.widgets.option_list import Option

from sparkboard.api.spotify_api import format_duration
from sparkboard.exceptions import (
    AuthenticationError,
    CompensationError,
    NotAuthenticatedError,
    NetworkError,
    APIError,
    UnsupportedForSharingError,
    UnknownKindError,
    ValidationError,
    ConfigurationError,
)
from sparkboard.projector import file_extension_label
from sparkboard.sparkboard import Sparkboard
from sparkboard.utils.dt import format_relative_time

if TYPE_CHECKING:
    from sparkboard.models.board import Board
    from sparkboard.models.spark import Spark

load_dotenv()

KIND_LABELS = {
    'image': 'Photo',
    'note': 'Note',
    'voice': 'Voice',
    'music': 'Music',
    'file': 'File',
}


def get_user_friendly_error(e: Exception) -> str:
    """Convert exception to user-friendly message."""
    if isinstance(e, CompensationError):
        return (
            "WARNING: sharing failed and the half-created post could not be removed. "
            f"Please delete post {e.post_id} from your profile."
        )
    elif isinstance(e, NotAuthenticatedError):
        return "You must be logged in to do that."
    elif isinstance(e, AuthenticationError):
        return "Login failed. Please check your email and password."
    elif isinstance(e, UnsupportedForSharingError):
        return "This spark can't be shared."
    elif isinstance(e, UnknownKindError):
        return "This spark has an unknown type."
    elif isinstance(e, NetworkError):
        return "Network error. Please check your internet connection."
    elif isinstance(e, ValidationError):
        return f"Invalid input: {e}"
    elif isinstance(e, ConfigurationError):
        return f"Configuration error: {e}"
    elif isinstance(e, APIError):
        return f"Server error: {escape(str(e))}"
    else:
        return f"Error: {escape(str(e))}"


def describe_spark(spark: Spark) -> str:
    """One-line label for a spark in the board list."""
    try:
        kind = spark.kind
    except UnknownKindError:
        return f"Unknown: {escape(spark.title or 'Untitled')}"
    label = KIND_LABELS.get(kind.value, kind.value)
    extension = file_extension_label(spark)
    title = spark.title or 'Untitled'
    suffix = f" ({extension})" if extension else ""
    return f"{label}: {escape(title)}{suffix}"


def describe_track(track: dict) -> str:
    """One-line label for a Spotify search result."""
    artists = ", ".join(a.get('name', '') for a in track.get('artists') or [])
    label = escape(track.get('name') or 'Untitled')
    if artists:
        label += f" - {escape(artists)}"
    if track.get('duration_ms'):
        label += f" ({format_duration(track['duration_ms'])})"
    return label


class SparkboardScreen(Screen):

    @property
    def sb_app(self) -> SparkboardApp:
        """Get the app cast to SparkboardApp type."""
        return self.app  # type: ignore[return-value]

    def show_status(self, message: str, error: bool = False) -> None:
        try:
            card = self.query_one(".panel")
            status = self.query_one("#status", Label)
            card.remove_class("panel-error", "panel-ok")
            card.add_class("panel-error" if error else "panel-ok")
            status.update(message)
        except NoMatches:
            pass  # Screen already torn down


class MainMenuScreen(SparkboardScreen):
    """Main menu with available actions."""

    BINDINGS = [
        Binding("escape", "quit", "Quit"),
    ]

    def compose(self) -> ComposeResult:
        actor = self.sb_app.sparkboard.actor if self.sb_app.sparkboard else None
        yield Header()
        yield Container(
            Container(
                Label(f"Signed in as {escape(actor.display_name) if actor else '?'}", id="hint"),
                Label("Select an Action", id="heading"),
                OptionList(
                    Option("My boards", id="boards"),
                    Option("Community feed", id="feed"),
                    Option("Exit", id="exit"),
                    id="action-list",
                ),
                classes="panel",
            ),
            id="screen-body",
        )
        yield Footer()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option.id == "boards":
            self.sb_app.push_screen(BoardListScreen())
        elif event.option.id == "feed":
            self.sb_app.push_screen(FeedScreen())
        elif event.option.id == "exit":
            self.sb_app.exit()


class BoardListScreen(SparkboardScreen):
    """Screen to pick one of the user's boards."""

    BINDINGS = [
        Binding("escape", "go_back", "Back"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Container(
                Label("Boards", id="heading"),
                OptionList(id="board-list"),
                Label("", id="status"),
                classes="panel",
            ),
            id="screen-body",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.run_worker(self.load_boards(), exclusive=True)

    async def load_boards(self) -> None:
        sparkboard = self.sb_app.sparkboard
        option_list = self.query_one("#board-list", OptionList)
        try:
            self.sb_app.boards = await sparkboard.board_api.get_boards(sparkboard.actor)
        except Exception as e:
            self.show_status(get_user_friendly_error(e), error=True)
            return
        option_list.clear_options()
        if not self.sb_app.boards:
            option_list.add_option(Option("No boards yet", id="none", disabled=True))
        for board in self.sb_app.boards:
            option_list.add_option(Option(escape(board.name), id=board.id))

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        board_id = event.option.id
        self.sb_app.current_board = next((b for b in self.sb_app.boards if b.id == board_id), None)
        if self.sb_app.current_board:
            self.sb_app.push_screen(BoardScreen())

    def action_go_back(self) -> None:
        self.sb_app.pop_screen()


class BoardScreen(SparkboardScreen):
    """Sparks on the current board, plus board-level sharing."""

    BINDINGS = [
        Binding("escape", "go_back", "Back"),
        Binding("s", "share_board", "Share board"),
        Binding("u", "unshare_board", "Unshare board"),
        Binding("o", "organize", "Organize"),
        Binding("m", "add_music", "Add music"),
    ]

    def compose(self) -> ComposeResult:
        board = self.sb_app.current_board
        yield Header()
        yield Container(
            Container(
                Label(escape(board.name) if board else "", id="hint"),
                Label("Select a spark to share", id="heading"),
                OptionList(id="spark-list"),
                Label("", id="status"),
                classes="panel",
            ),
            id="screen-body",
        )
        yield Footer()

    def on_screen_resume(self) -> None:
        # Fires on first push too, and again after returning from AddMusicScreen
        self.run_worker(self.load_sparks(), exclusive=True)

    async def load_sparks(self) -> None:
        board = self.sb_app.current_board
        option_list = self.query_one("#spark-list", OptionList)
        if board is None:
            return
        try:
            self.sb_app.sparks = await self.sb_app.sparkboard.spark_api.get_sparks(board.id)
        except Exception as e:
            self.show_status(get_user_friendly_error(e), error=True)
            return
        option_list.clear_options()
        if not self.sb_app.sparks:
            option_list.add_option(Option("This board is empty", id="none", disabled=True))
        for spark in self.sb_app.sparks:
            option_list.add_option(Option(describe_spark(spark), id=spark.id))

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        spark_id = event.option.id
        self.sb_app.current_spark = next((s for s in self.sb_app.sparks if s.id == spark_id), None)
        if self.sb_app.current_spark:
            self.sb_app.push_screen(ShareSparkScreen())

    async def run_board_action(self, action: str) -> None:
        sparkboard = self.sb_app.sparkboard
        board = self.sb_app.current_board
        if board is None:
            return
        try:
            if action == "share":
                await sparkboard.share_board(board.id)
                self.show_status(f'"{escape(board.name)}" shared to community!')
            elif action == "unshare":
                removed = await sparkboard.unshare_board(board.id)
                self.show_status("Board unshared." if removed else "This board is not shared.")
            elif action == "organize":
                placements = await sparkboard.organize_board(board.id, 'grid')
                self.show_status(f"Arranged {len(placements)} sparks.")
        except Exception as e:
            self.show_status(get_user_friendly_error(e), error=True)

    def action_share_board(self) -> None:
        self.run_worker(self.run_board_action("share"), exclusive=True)

    def action_unshare_board(self) -> None:
        self.run_worker(self.run_board_action("unshare"), exclusive=True)

    def action_organize(self) -> None:
        self.run_worker(self.run_board_action("organize"), exclusive=True)

    def action_add_music(self) -> None:
        self.sb_app.push_screen(AddMusicScreen())

    def action_go_back(self) -> None:
        self.sb_app.pop_screen()


class ShareSparkScreen(SparkboardScreen):
    """Screen to caption and share a single spark."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.sharing: bool = False

    def compose(self) -> ComposeResult:
        spark = self.sb_app.current_spark
        yield Header()
        yield Container(
            Container(
                Label(describe_spark(spark) if spark else "", id="hint"),
                Label("Share to community", id="heading"),
                Input(placeholder="Add a caption (optional)...", id="caption-input"),
                Horizontal(
                    Button("Share", variant="primary", id="share"),
                    Button("Cancel", variant="default", id="cancel"),
                    id="buttons",
                ),
                Label("", id="status"),
                classes="panel",
            ),
            id="screen-body",
        )
        yield Footer()

    async def run_share(self, caption: str) -> None:
        spark = self.sb_app.current_spark
        share_btn = self.query_one("#share", Button)
        share_btn.disabled = True
        self.sharing = True
        try:
            await self.sb_app.sparkboard.share_service.share_spark(self.sb_app.sparkboard.actor, spark, caption)
            self.show_status("Spark shared to community!")
        except Exception as e:
            self.show_status(get_user_friendly_error(e), error=True)
            share_btn.disabled = False
        finally:
            self.sharing = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "share" and not self.sharing:
            caption = self.query_one("#caption-input", Input).value
            self.run_worker(self.run_share(caption), exclusive=True)
        elif event.button.id == "cancel":
            self.sb_app.pop_screen()

    def action_cancel(self) -> None:
        self.sb_app.pop_screen()


class AddMusicScreen(SparkboardScreen):
    """Search Spotify and place a track on the current board."""

    BINDINGS = [
        Binding("escape", "go_back", "Back"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.tracks: list[dict] = []

    def compose(self) -> ComposeResult:
        board = self.sb_app.current_board
        yield Header()
        yield Container(
            Container(
                Label(escape(board.name) if board else "", id="hint"),
                Label("Add music", id="heading"),
                Input(placeholder="Search songs...", id="search-input"),
                OptionList(id="track-list"),
                Label("", id="status"),
                classes="panel",
            ),
            id="screen-body",
        )
        yield Footer()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "search-input" and event.value.strip():
            self.run_worker(self.search(event.value), exclusive=True)

    async def search(self, query: str) -> None:
        option_list = self.query_one("#track-list", OptionList)
        try:
            self.tracks = await self.sb_app.sparkboard.search_tracks(query)
        except Exception as e:
            self.show_status(get_user_friendly_error(e), error=True)
            return
        option_list.clear_options()
        if not self.tracks:
            option_list.add_option(Option("No tracks found", id="none", disabled=True))
        for index, track in enumerate(self.tracks):
            option_list.add_option(Option(describe_track(track), id=str(index)))

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option.id and event.option.id.isdigit():
            track = self.tracks[int(event.option.id)]
            self.run_worker(self.add_track(track), exclusive=True)

    async def add_track(self, track: dict) -> None:
        board = self.sb_app.current_board
        if board is None:
            return
        try:
            await self.sb_app.sparkboard.add_music(board.id, track)
            self.show_status(f"Added {describe_track(track)} to the board.")
        except Exception as e:
            self.show_status(get_user_friendly_error(e), error=True)

    def action_go_back(self) -> None:
        self.sb_app.pop_screen()


class FeedScreen(SparkboardScreen):
    """Community feed, newest first."""

    BINDINGS = [
        Binding("escape", "go_back", "Back"),
        Binding("r", "refresh", "Refresh"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Container(
                Label("Community", id="heading"),
                OptionList(id="feed-list"),
                Label("", id="status"),
                classes="panel",
            ),
            id="screen-body",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.run_worker(self.load_feed(), exclusive=True)

    async def load_feed(self) -> None:
        option_list = self.query_one("#feed-list", OptionList)
        try:
            posts, profiles = await self.sb_app.sparkboard.get_feed(limit=50)
        except Exception as e:
            self.show_status(get_user_friendly_error(e), error=True)
            return
        option_list.clear_options()
        if not posts:
            option_list.add_option(Option("Nothing shared yet", id="none", disabled=True))
        for post in posts:
            profile = profiles.get(post.user_id)
            author = profile.display_name if profile else "Someone"
            title = post.attachments[0].title if post.attachments and post.attachments[0].title else post.type.value
            when = format_relative_time(post.created_at) if post.created_at else ""
            option_list.add_option(Option(
                f"{escape(author)} shared {escape(title)} ({post.type.value}) {when}",
                id=post.id,
            ))

    def action_refresh(self) -> None:
        self.run_worker(self.load_feed(), exclusive=True)

    def action_go_back(self) -> None:
        self.sb_app.pop_screen()


class SparkboardApp(App):
    """Main Textual app for Sparkboard."""

    CSS = """
    Screen {
        background: $background;
    }

    #screen-body {
        height: 1fr;
        align: center middle;
        padding: 1 2;
    }

    .panel {
        width: 90%;
        max-width: 110;
        height: auto;
        padding: 1 3;
        border: tall $accent;
        background: $panel;
    }

    .panel-ok {
        border: tall $success;
    }

    .panel-error {
        border: tall $error;
        background: $error 15%;
    }

    #heading {
        width: 100%;
        text-align: center;
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }

    #hint {
        width: 100%;
        text-align: center;
        color: $text-muted;
    }

    #status {
        width: 100%;
        text-align: center;
        margin-top: 1;
    }

    .splash {
        width: auto;
        min-width: 36;
        height: auto;
        padding: 2 4;
        border: tall $accent;
        background: $panel;
    }

    #splash-text {
        width: 100%;
        text-align: center;
        color: $text-muted;
    }

    OptionList {
        width: 100%;
        height: auto;
        max-height: 24;
        border: tall $panel-lighten-2;
    }

    OptionList:focus, Input:focus {
        border: tall $accent;
    }

    Input {
        width: 100%;
    }

    #buttons {
        width: 100%;
        height: auto;
        align: center middle;
        margin-top: 1;
    }

    #buttons Button {
        margin: 0 2;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.sparkboard: Sparkboard | None = None
        self.boards: list[Board] = []
        self.current_board: Board | None = None
        self.sparks: list[Spark] = []
        self.current_spark: Spark | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Center(
            Middle(
                Container(
                    LoadingIndicator(id="spinner"),
                    Label("Connecting to Sparkboard...", id="splash-text"),
                    classes="splash",
                )
            ),
            id="screen-body",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.title = "Sparkboard"
        self.run_worker(self.initialize(), exclusive=True)

    async def initialize(self) -> None:
        try:
            self.sparkboard = Sparkboard()
            await self.sparkboard.login()
            self.push_screen(MainMenuScreen())
        except Exception as e:
            splash_text = self.query_one("#splash-text", Label)
            splash_text.update(get_user_friendly_error(e))
            # Hide spinner on error
            spinner = self.query_one("#spinner", LoadingIndicator)
            spinner.display = False

    async def on_unmount(self) -> None:
        if self.sparkboard:
            await self.sparkboard.close()


def main() -> None:
    app = SparkboardApp()
    app.run()


if __name__ == "__main__":
    main()
