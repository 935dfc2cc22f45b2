"""CLI entry point for gwendoline.

This module provides the command-line interface. It can be invoked as
`gwendoline` (via the script entry point) or `python -m gwendoline`.

The prompt is read from stdin. With --chat, stdin holds a JSON array of prior
messages and the updated array is written to stdout.
"""

import argparse
import asyncio
import logging
import sys

from gwendoline import __version__
from gwendoline.app import RunOptions, run
from gwendoline.config import GwendolineSettings
from gwendoline.errors import ConversationParseError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gwendoline",
        description="Answer a prompt from stdin with an Ollama model and tools",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"gwendoline {__version__}",
    )

    parser.add_argument(
        "--cloud",
        action="store_true",
        help="Use the cloud model (default: gpt-oss:120b-cloud, can be set via GWENDOLINE_CLOUD_MODEL)",
    )

    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Model to use, overrides --cloud and the agent file",
    )

    parser.add_argument(
        "--mcp",
        action="store_true",
        help="Connect to the MCP servers declared in mcp.json",
    )

    parser.add_argument(
        "--chat",
        action="store_true",
        help="Read a JSON message list from stdin and write the updated list to stdout",
    )

    parser.add_argument(
        "--stream",
        action="store_true",
        help="Stream the answer as it is generated (ignored with --chat)",
    )

    parser.add_argument(
        "--thinking",
        action="store_true",
        help="Keep the model's reasoning in the output",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--agent",
        type=str,
        default=None,
        help="Agent file to use (default: AGENT.md in the working directory, if present)",
    )

    return parser


def build_settings(args: argparse.Namespace) -> GwendolineSettings:
    """Build settings, CLI args override environment variables."""
    settings_kwargs = {}
    if args.debug:
        settings_kwargs["log_level"] = "DEBUG"
    if args.agent is not None:
        settings_kwargs["agent_file"] = args.agent
    return GwendolineSettings(**settings_kwargs)


def configure_logging(level: str) -> None:
    """Send log records to stderr; stdout is reserved for the answer."""
    logging.basicConfig(
        level=level.upper(),
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def read_input() -> str | None:
    """Read the prompt from stdin, or ask for it on a terminal.

    Returns:
        The input text, or None if the user said goodbye
    """
    if not sys.stdin.isatty():
        return sys.stdin.read()

    try:
        prompt = input("Type your prompt!\n\n")
    except EOFError:
        return None
    if prompt.strip() == "/bye":
        return None
    return prompt


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the gwendoline CLI.

    Returns:
        int: Process exit code
    """
    args = build_parser().parse_args(argv)

    settings = build_settings(args)
    configure_logging(settings.log_level)

    options = RunOptions(
        cloud=args.cloud,
        model=args.model,
        use_mcp=args.mcp,
        chat=args.chat,
        stream=args.stream,
        thinking=args.thinking,
        agent_file=args.agent,
    )

    interactive = sys.stdin.isatty()
    if interactive:
        # Chat mode needs a message list on stdin.
        options.chat = False

    input_text = read_input()
    if input_text is None:
        sys.stdout.write("Bye!")
        return 0

    try:
        output = asyncio.run(run(settings, options, input_text))
    except ConversationParseError as e:
        logger.error(f"Could not parse input of chat messages: {e}")
        return 1
    except Exception as e:
        logger.error(f"Fatal error in main(): {e}")
        return 1

    sys.stdout.write(output)
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
