# docchat/interface/cli.py

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich import box
from rich.text import Text

from docchat.domain.models import ChatMessage, Role


console = Console()

COMMANDS_HINT = (
    "[dim]:pdf <path>  ·  :word <path>  ·  :web <url>  ·  :new  ·  :quit[/dim]"
)


def display_welcome_banner(semantic: bool) -> None:
    mode = "embeddings + chat model" if semantic else "keyword search"
    console.print(Panel.fit(
        "[bold cyan]📄 Document Chat[/bold cyan]\n"
        f"[dim]Answers from your PDF, Word file or web page · {mode}[/dim]\n"
        + COMMANDS_HINT,
        box=box.DOUBLE,
        border_style="cyan",
    ))


def prompt_for_input() -> str:
    return Prompt.ask("\n[bold yellow]❓ You[/bold yellow]")


def display_message(message: ChatMessage) -> None:
    if message.role is Role.USER:
        console.print(Text(message.text, style="bold white"))
        return

    console.print(Panel(
        Text(message.text),
        title=f"[dim]{message.timestamp:%H:%M}[/dim]",
        title_align="right",
        border_style="green",
        box=box.ROUNDED,
        padding=(1, 2),
    ))


def display_answer(text: str) -> None:
    display_message(ChatMessage(Role.ASSISTANT, text))


def display_error(message: str) -> None:
    console.print(f"\n[bold red]✗ Error:[/bold red] {message}\n")
