"""
py_cli/commands.py
Command Registry and Interface Definition.
Handlers register themselves at import time; the controller only talks to the registry.
"""
from typing import Protocol, List, Dict, Optional, Any
from .models import CLIContext, CommandResponse

class ICommand(Protocol):
    """ Interface that all CLI commands must implement. """
    name: str
    description: str
    syntax: str

    def execute(self, ctx: CLIContext, args: List[str]) -> CommandResponse:
        """ Runs the command and returns a structured CommandResponse. """
        ...

class CommandRegistry:
    """ Name/alias -> command lookup. """
    def __init__(self):
        self._commands: Dict[str, ICommand] = {}
        self._aliases: Dict[str, str] = {}

    def register(self, command: ICommand, aliases: Optional[List[str]] = None):
        self._commands[command.name] = command
        for alias in aliases or []:
            self._aliases[alias] = command.name

    def get_command(self, name: str) -> Optional[ICommand]:
        """ Resolves command by name or alias. """
        if name in self._commands:
            return self._commands[name]
        target_name = self._aliases.get(name)
        if target_name:
            return self._commands.get(target_name)
        return None

    def list_commands(self) -> List[ICommand]:
        """ Returns list of all registered commands (sorted by name). """
        return sorted(self._commands.values(), key=lambda c: c.name)

    def describe(self) -> List[Dict[str, Any]]:
        return [
            {"name": c.name, "syntax": c.syntax, "description": c.description}
            for c in self.list_commands()
        ]

# Global Instance for convenience
registry = CommandRegistry()

class HelpCommand(ICommand):
    name = "help"
    description = "Lists all available commands."
    syntax = "help"

    def __init__(self, source: CommandRegistry):
        self.source = source

    def execute(self, ctx: CLIContext, args: List[str]) -> CommandResponse:
        return CommandResponse(True, message="Available commands", payload={"commands": self.source.describe()})

registry.register(HelpCommand(registry), aliases=["?"])
