from __future__ import annotations

from collections.abc import Iterable

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..core.cards import Card
from ..core.models import STEP_ACTION, STEP_CARDS, STEP_OBSERVATIONS
from ..engine.street import TableView
from ..storage import StoredHand


class RichPresenter:
    def __init__(self, *, no_color: bool = False):
        # Color is on unless explicitly disabled via --no-color.
        if no_color:
            self.console = Console(force_terminal=False, color_system=None)
        else:
            self.console = Console(force_terminal=True, color_system="auto")

    def start_hand(self) -> None:
        guide = (
            "[bold]Record a hand[/] street by street.\n"
            "- Cards: type them separated by spaces, e.g. [cyan]As Kd[/].\n"
            "- Actions: f = fold, c = call, k = check, r <amount> = raise.\n"
            "- Observations: free text, or press enter to skip.\n\n"
            "[bold]Controls[/]: b = back one step • q = quit without saving"
        )
        self.console.print(Panel(guide, title="Hand Recorder", border_style="green"))
        self.console.print()

    def show_view(self, view: TableView) -> None:
        self.console.rule(view.street.upper())

        info = Table.grid(padding=(0, 1))
        info.add_column(style="bold cyan", justify="right")
        info.add_column(justify="left")
        info.add_row("Hero", f"{view.hero_seat or '-'} ({_amount(view.stack_size)} stack)")
        info.add_row("Blinds", f"{_amount(view.small_blind)}/{_amount(view.big_blind)}")
        if view.hole_cards:
            info.add_row("Hole cards", self._format_cards_colored(view.hole_cards))
        if view.community_cards:
            info.add_row("Board", self._format_cards_colored(view.community_cards))
        info.add_row("Current bet", _amount(view.highest_bet))
        self.console.print(Panel(info, title="Table Status", border_style="magenta", expand=False))

        table = Table(show_header=True, header_style="bold blue", box=box.SIMPLE_HEAVY)
        table.add_column("Seat", style="bold")
        table.add_column("Action")
        table.add_column("Amount", justify="right")
        for entry in view.actions:
            marker = "▶ " if entry.seat == view.acting_seat else ""
            seat = f"{marker}{entry.seat}"
            if entry.seat == view.hero_seat:
                seat += " [dim](hero)[/]"
            table.add_row(seat, entry.action or "[dim]-[/]", _amount(entry.amount) if entry.amount else "")
        self.console.print(table)

    def prompt_for(self, view: TableView) -> str:
        if view.step_kind == STEP_CARDS:
            picked = " ".join(card.label for card in view.selected_cards)
            suffix = f" [{picked}]" if picked else ""
            return f"{view.street.capitalize()} cards ({view.card_target}){suffix}: "
        if view.step_kind == STEP_ACTION:
            if view.pending_raise_seat:
                return f"Raise amount for {view.pending_raise_seat}: "
            return f"{view.acting_seat} action [f/c/k/r]: "
        if view.step_kind == STEP_OBSERVATIONS:
            return f"{view.street.capitalize()} observations (enter to continue): "
        return "> "

    def message(self, text: str) -> None:
        self.console.print(f"[dim]{text}[/]")

    def warn(self, text: str) -> None:
        self.console.print(f"[red]{text}[/]")

    def saved(self, hand_id: str | None) -> None:
        self.console.print(Panel(f"Saved hand [bold]{hand_id}[/]", border_style="green", expand=False))

    def hands(self, hands: Iterable[StoredHand]) -> None:
        table = Table(title="Recorded hands", show_header=True, header_style="bold blue")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Recorded")
        table.add_column("Game")
        table.add_column("Hero")
        table.add_column("Hole cards")
        rows = 0
        for hand in hands:
            record = hand.input
            hole = " ".join(f"{c.get('rank', '?')}{c.get('suit', '?')}" for c in record.get("holeCards") or [])
            table.add_row(
                hand.id,
                hand.created_at[:19].replace("T", " "),
                str(record.get("gameStyle") or "-"),
                str(record.get("position") or "-"),
                hole or "-",
            )
            rows += 1
        if not rows:
            self.console.print("No hands recorded yet.")
            return
        self.console.print(table)

    def hand(self, hand: StoredHand) -> None:
        record = hand.input
        info = Table.grid(padding=(0, 1))
        info.add_column(style="bold cyan", justify="right")
        info.add_column(justify="left")
        info.add_row("Game", str(record.get("gameStyle") or "-"))
        info.add_row("Blinds", f"{_amount(record.get('smallBlind'))}/{_amount(record.get('bigBlind'))}")
        info.add_row("Players", str(record.get("playerCount") or "-"))
        info.add_row("Hero", f"{record.get('position') or '-'} ({_amount(record.get('stackSize'))} stack)")
        self.console.print(Panel(info, title=f"Hand {hand.id}", border_style="bold cyan", expand=False))

        for street, card_key in (("preflop", "holeCards"), ("flop", "flopCards"), ("turn", "turnCard"), ("river", "riverCard")):
            raw = record.get(card_key) or []
            if isinstance(raw, dict):
                raw = [raw]
            cards = " ".join(f"{c.get('rank', '?')}{c.get('suit', '?')}" for c in raw)
            self.console.rule(f"{street.upper()} {cards}".strip())
            for entry in record.get(f"{street}Actions") or []:
                amount = entry.get("amount")
                tail = f" {_amount(amount)}" if amount is not None else ""
                self.console.print(f"  {entry.get('position')}: {entry.get('action') or '-'}{tail}")
            notes = record.get(f"{street}Observations")
            if notes:
                self.console.print(f"  [italic]{escape(str(notes))}[/]")

    # --- card rendering helpers ---
    def _format_cards_colored(self, cards: Iterable[Card]) -> str:
        # Four-color deck palette readable on light and dark terminals.
        colors = {
            "s": "bold white",
            "h": "bold #c14657",
            "d": "bold #2f73d2",
            "c": "bold #2f8a5e",
        }
        return " ".join(f"[{colors.get(card.suit, 'bold')}]{card.rank}{card.symbol}[/]" for card in cards)


def _amount(value: object) -> str:
    if value is None:
        return "-"
    try:
        return f"{float(value):g}"
    except (TypeError, ValueError):
        return str(value)
