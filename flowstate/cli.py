"""Click-based CLI entrypoint for flowstate.

Subcommands live in ``flowstate.commands`` and are imported on first
use, so ``flowstate --help`` stays fast. Unknown commands raise an error.
"""

from __future__ import annotations

import importlib
import sys

import click

from flowstate import __version__

# ---------------------------------------------------------------------------
# Lazy Click Group
# ---------------------------------------------------------------------------

_LAZY_COMMANDS: dict[str, tuple[str, str]] = {
    "lock": ("flowstate.commands.lock_cmd", "lock_cmd"),
    "read": ("flowstate.commands.read", "read"),
    "set": ("flowstate.commands.set_cmd", "set_cmd"),
    "sweep": ("flowstate.commands.sweep", "sweep"),
    "write": ("flowstate.commands.write", "write"),
}


class FlowGroup(click.Group):
    """Click group that imports subcommand modules on first access."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return all available command names (eager + lazy)."""
        eager = set(self.commands or {})
        return sorted(eager | _LAZY_COMMANDS.keys())

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Look up a command, importing lazily if needed."""
        cmd = self.commands.get(cmd_name)
        if cmd is not None:
            return cmd

        entry = _LAZY_COMMANDS.get(cmd_name)
        if entry is None:
            return None

        module_path, attr_name = entry
        mod = importlib.import_module(module_path)
        loaded_cmd: click.Command = getattr(mod, attr_name)
        # Cache so subsequent lookups skip the import
        self.add_command(loaded_cmd, cmd_name)
        return loaded_cmd

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        if not args:
            return super().resolve_command(ctx, args)

        cmd_name = args[0]
        cmd_obj = self.get_command(ctx, cmd_name)
        if cmd_obj is not None:
            return cmd_name, cmd_obj, list(args[1:])

        ctx.fail(f"Unknown command '{cmd_name}'. Run 'flowstate --help' for available commands.")


# ---------------------------------------------------------------------------
# Main CLI Group
# ---------------------------------------------------------------------------


@click.group(cls=FlowGroup, invoke_without_command=True)
@click.version_option(__version__, prog_name="flowstate")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """flowstate - inspect and update shared JSON state files safely."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ---------------------------------------------------------------------------
# Entry Point
# ---------------------------------------------------------------------------


def main() -> None:
    """Entry point for the ``flowstate`` console script.

    Usage errors are normalised to exit code 1; commands choose their
    own codes (75 for contention timeouts).
    """
    try:
        cli(standalone_mode=False)
    except click.UsageError as exc:
        click.echo(f"Error: {exc.format_message()}", err=True)
        sys.exit(1)
    except click.Abort:
        sys.exit(1)
    except SystemExit as exc:
        code = exc.code if isinstance(exc.code, int) else 1
        sys.exit(1 if code == 2 else code)


if __name__ == "__main__":
    main()
