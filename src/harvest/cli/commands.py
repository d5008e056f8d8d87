# src/harvest/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from ..tasks.task_codec import TaskCodec
from ..tasks.task_errors import ErrorKind, Ok
from ..tasks.task_models import Task, parse_datetime
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)

TIME_FORMAT_HINT = "yyyy-MM-dd HH:mm"
DUPLICATE_TEXT = "Duplicate task detected! Task already exists."
INVALID_TIME_TEXT = f"Error: Invalid time or time format. Use: {TIME_FORMAT_HINT}"
UNKNOWN_TEXT = "Unrecognised command!"
UNEXPECTED_TEXT = "Error: An unexpected error occurred."


class Command(StrEnum):
    HELP = "help"
    LIST = "list"
    TODO = "todo"
    DEADLINE = "deadline"
    EVENT = "event"
    MARK = "mark"
    UNMARK = "unmark"
    FIND = "find"
    DELETE = "delete"
    BYE = "bye"
    UNKNOWN = "unknown"


# Classification priority.
_ORDER: tuple[Command, ...] = (
    Command.HELP,
    Command.LIST,
    Command.TODO,
    Command.DEADLINE,
    Command.EVENT,
    Command.MARK,
    Command.UNMARK,
    Command.FIND,
    Command.DELETE,
    Command.BYE,
)
_WHOLE_WORD = frozenset({Command.HELP, Command.LIST, Command.BYE})


def _starts_with_word(text: str, word: str) -> bool:
    if not text.startswith(word):
        return False
    return len(text) == len(word) or text[len(word)].isspace()


def classify(line: str) -> Command:
    """
    Map one raw input line to a Command.

    help/list/bye must be the whole line (any case). The other commands match
    when the line starts with the command word followed by whitespace or nothing.
    """
    text = (line or "").strip()
    if not text:
        return Command.UNKNOWN

    for cmd in _ORDER:
        if cmd in _WHOLE_WORD:
            if text.lower() == cmd.value:
                return cmd
        elif _starts_with_word(text, cmd.value):
            return cmd
    return Command.UNKNOWN


def split_command(line: str) -> tuple[Command, str]:
    """Return (command, argument text after the command word, trimmed)."""
    cmd = classify(line)
    text = (line or "").strip()
    if cmd in (Command.UNKNOWN, *_WHOLE_WORD):
        return cmd, ""
    return cmd, text[len(cmd.value) :].strip()


@dataclass(frozen=True, slots=True)
class Reply:
    text: str
    should_exit: bool = False


CommandHandler = Callable[["CommandInterpreter", str], Reply]


class CommandRegistry:
    """Command -> handler table with one-line help entries."""

    def __init__(self) -> None:
        self._handlers: dict[Command, CommandHandler] = {}
        self._help: dict[Command, tuple[str, str]] = {}

    def register(
        self,
        command: Command,
        handler: CommandHandler,
        help_text: str,
        usage: str | None = None,
    ) -> None:
        self._handlers[command] = handler
        self._help[command] = (usage or command.value, help_text)

    def get(self, command: Command) -> CommandHandler | None:
        return self._handlers.get(command)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for usage, help_text in self._help.values():
            lines.append(f"  {usage} - {help_text}")
        return "\n".join(lines) + "\n"


registry = CommandRegistry()


class CommandInterpreter:
    """
    Turns one input line into one reply.

    Holds the store and the codec; keeps no per-command state of its own.
    Every failure (bad input, store errors, save errors) comes back as reply
    text, so front ends only ever see strings.
    """

    def __init__(
        self,
        store: TaskStore,
        codec: TaskCodec,
        *,
        clock: Callable[[], datetime] = datetime.now,
        commands: CommandRegistry | None = None,
    ) -> None:
        self.store = store
        self.codec = codec
        self.clock = clock
        self.commands = commands or registry

    def execute(self, line: str) -> Reply:
        cmd, args = split_command(line)
        handler = self.commands.get(cmd)
        if handler is None:
            return Reply(UNKNOWN_TEXT)
        logger.debug("Executing command=%s", cmd)
        return handler(self, args)

    def handle(self, line: str) -> str:
        """Front-end entry point: never raises."""
        try:
            return self.execute(line).text
        except Exception:
            logger.exception("Command handler crashed (line=%r).", line)
            return UNEXPECTED_TEXT

    # ---- helpers shared by handlers ----

    def persist(self) -> str:
        """Flush the store; returns a warning suffix for the reply, or ""."""
        res = self.codec.save(self.store.all())
        if isinstance(res, Ok):
            return ""
        return f"\nWarning: {res.message}"

    def render_tasks(self, tasks: Sequence[Task], header: str, empty: str) -> str:
        if not tasks:
            return empty
        lines = [header]
        for i, task in enumerate(tasks, start=1):
            lines.append(f"{i}.{task.to_display_string()}")
        return "\n".join(lines) + "\n"

    def render_list(self) -> str:
        return self.render_tasks(
            self.store.all(), "Here are the tasks in your list:", "No tasks added.\n"
        )

    def is_future(self, when: datetime) -> bool:
        return when > self.clock()


# ---- handlers ----


def cmd_help(interp: CommandInterpreter, args: str) -> Reply:
    return Reply(interp.commands.build_help())


def cmd_list(interp: CommandInterpreter, args: str) -> Reply:
    return Reply(interp.render_list())


def cmd_todo(interp: CommandInterpreter, args: str) -> Reply:
    description = args.strip()
    if not description:
        return Reply("Error: Task description cannot be empty!")
    if interp.store.task_exists(description):
        return Reply(DUPLICATE_TEXT)

    res = interp.store.add_todo(description)
    if not isinstance(res, Ok):
        return Reply(f"Error: {res.message}")
    warning = interp.persist()
    return Reply(f"Got it. I've added this task: {description}{warning}")


def cmd_deadline(interp: CommandInterpreter, args: str) -> Reply:
    """
    deadline <description> /by <yyyy-MM-dd HH:mm>
    """
    prefix = "Error adding deadline task: "
    if "/by" not in args:
        return Reply(
            f"{prefix}Correct format: deadline [Task description] /by [{TIME_FORMAT_HINT}]"
        )

    head, _, tail = args.partition("/by")
    description = head.strip()
    by_text = tail.strip()
    if not by_text:
        return Reply(f"{prefix}Missing deadline date. Use: /by [{TIME_FORMAT_HINT}]")
    if not description:
        return Reply(f"{prefix}Task description cannot be empty!")

    parsed = parse_datetime(by_text)
    if not isinstance(parsed, Ok):
        return Reply(INVALID_TIME_TEXT)
    if not interp.is_future(parsed.value):
        return Reply("Error: Deadline cannot be in the past!")
    if interp.store.task_exists(description):
        return Reply(DUPLICATE_TEXT)

    res = interp.store.add_deadline(description, by_text)
    if not isinstance(res, Ok):
        if res.kind in (ErrorKind.INVALID_DEADLINE_FORMAT, ErrorKind.INVALID_DATE_FORMAT):
            return Reply(INVALID_TIME_TEXT)
        return Reply(f"{prefix}{res.message}")

    warning = interp.persist()
    return Reply(f"Got it. I've added this deadline task: {description}{warning}")


def cmd_event(interp: CommandInterpreter, args: str) -> Reply:
    """
    event <description> /from <yyyy-MM-dd HH:mm> /to <yyyy-MM-dd HH:mm>

    Overlaps with stored events only produce a warning; the event is added anyway.
    """
    prefix = "Error adding event task: "
    if "/from" not in args or "/to" not in args:
        return Reply(
            f"{prefix}Correct format: event [Task description] /from [Start time] /to [End time]"
        )

    head, _, tail = args.partition("/from")
    description = head.strip()
    if not description:
        return Reply(f"{prefix}Task description cannot be empty!")

    from_part, _, to_part = tail.partition("/to")
    from_text = from_part.strip()
    to_text = to_part.strip()
    if not from_text or not to_text:
        return Reply(f"{prefix}Both start time (/from) and end time (/to) must be provided.")

    start = parse_datetime(from_text)
    end = parse_datetime(to_text)
    if not isinstance(start, Ok) or not isinstance(end, Ok):
        return Reply(INVALID_TIME_TEXT)
    if not interp.is_future(start.value) or not interp.is_future(end.value):
        return Reply("Error: Event times cannot be in the past!")
    if start.value > end.value:
        return Reply("Error: Start time cannot be after end time!")
    if interp.store.task_exists(description):
        return Reply(DUPLICATE_TEXT)

    clash = interp.store.check_event_clash(start.value, end.value)

    res = interp.store.add_event(description, from_text, to_text)
    if not isinstance(res, Ok):
        match res.kind:
            case ErrorKind.INVALID_TIME_FORMAT | ErrorKind.INVALID_DATE_FORMAT:
                return Reply(INVALID_TIME_TEXT)
            case ErrorKind.INVALID_TIME_ORDER:
                return Reply("Error: Start time cannot be after end time!")
            case _:
                return Reply(f"{prefix}{res.message}")

    warning = interp.persist()
    count = interp.store.size()
    if clash is not None:
        return Reply(
            "Event added with a warning:\n"
            f"{clash}\n"
            f"New event added: {description}\n"
            f"Now you have {count} tasks in the list.{warning}"
        )
    return Reply(
        "Got it. I've added this event task:\n"
        f"{description}\n"
        f"Now you have {count} tasks in the list.{warning}"
    )


def _task_number(args: str) -> tuple[int | None, str]:
    """First whitespace-separated token as an int; (None, error text) on failure."""
    tokens = args.split()
    if not tokens:
        return None, "Please specify a task number."
    try:
        return int(tokens[0]), ""
    except ValueError:
        return None, "Task number must be a valid integer."


def cmd_mark(interp: CommandInterpreter, args: str) -> Reply:
    number, problem = _task_number(args)
    if number is None:
        return Reply(f"Error: {problem}")

    res = interp.store.mark_done(number)
    if not isinstance(res, Ok):
        return Reply(f"Error: {res.message}")
    warning = interp.persist()
    return Reply(
        "Nice! I've marked this task as done:\n"
        f"  {res.value.to_display_string()}{warning}\n"
        f"{interp.render_list()}"
    )


def cmd_unmark(interp: CommandInterpreter, args: str) -> Reply:
    number, problem = _task_number(args)
    if number is None:
        return Reply(f"Error: {problem}")

    res = interp.store.mark_not_done(number)
    if not isinstance(res, Ok):
        return Reply(f"Error: {res.message}")
    warning = interp.persist()
    return Reply(
        "OK, I've marked this task as not done yet:\n"
        f"  {res.value.to_display_string()}{warning}\n"
        f"{interp.render_list()}"
    )


def cmd_find(interp: CommandInterpreter, args: str) -> Reply:
    keyword = args.strip()
    if not keyword:
        return Reply("Error: Please provide a keyword to search. Correct format: find [keyword]")
    matches = interp.store.find_by_substring(keyword)
    return Reply(
        interp.render_tasks(
            matches, "Here are the matching tasks in your list:", "No matching tasks found.\n"
        )
    )


def cmd_delete(interp: CommandInterpreter, args: str) -> Reply:
    tokens = args.split()
    if not tokens:
        return Reply("Error: Please specify a task number to delete.")
    try:
        number = int(tokens[0])
    except ValueError:
        return Reply("Error: Task number must be a valid integer.")

    res = interp.store.delete(number)
    if not isinstance(res, Ok):
        if res.kind is ErrorKind.INDEX_OUT_OF_RANGE:
            return Reply(f"Error: Invalid task index: {tokens[0]}")
        return Reply(f"Error: {res.message}")

    warning = interp.persist()
    return Reply(
        "Noted. I've removed this task:\n"
        f"  {res.value.to_display_string()}\n"
        f"Now you have {interp.store.size()} tasks in the list.{warning}\n"
        f"{interp.render_list()}"
    )


def cmd_bye(interp: CommandInterpreter, args: str) -> Reply:
    warning = interp.persist()
    return Reply(f"Bye. Hope to see you again soon!{warning}", should_exit=True)


registry.register(Command.HELP, cmd_help, "Show available commands.")
registry.register(Command.LIST, cmd_list, "Display all tasks in the list.")
registry.register(
    Command.TODO, cmd_todo, "Add a task without a deadline.", usage="todo [Task description]"
)
registry.register(
    Command.DEADLINE,
    cmd_deadline,
    "Add a task with a deadline.",
    usage=f"deadline [Task description] /by [{TIME_FORMAT_HINT}]",
)
registry.register(
    Command.EVENT,
    cmd_event,
    "Add an event task.",
    usage=f"event [Task description] /from [{TIME_FORMAT_HINT}] /to [{TIME_FORMAT_HINT}]",
)
registry.register(Command.MARK, cmd_mark, "Mark a task as done.", usage="mark [Task number]")
registry.register(
    Command.UNMARK, cmd_unmark, "Mark a task as not done.", usage="unmark [Task number]"
)
registry.register(Command.FIND, cmd_find, "Find tasks by keyword.", usage="find [Keyword]")
registry.register(
    Command.DELETE, cmd_delete, "Delete a task from the list.", usage="delete [Task number]"
)
registry.register(Command.BYE, cmd_bye, "Save and exit.")
