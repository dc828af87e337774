"""Entry point: python -m learnings [global options] <command> ...

- list / ls:      search learnings in both scopes
- get / show:     print a learning (from every scope that has it)
- add:            create a learning
- remove / rm:    delete a learning from one scope
- topics:         print the known topics and tags
- serve:          MCP server on stdio
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from learnings.config import LearningsConfig, load_config
from learnings.errors import LearningsError


def _setup_logging(level: str) -> None:
    # stdout belongs to the command output / MCP transport
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="learnings", description="Manage personal learnings")
    parser.add_argument("--repository", help="Repository path or git URL for global learnings")
    parser.add_argument("--clone-location", help="Where to clone remote repositories")
    parser.add_argument("--local-folder", help="Local learnings folder relative to cwd")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    ls = sub.add_parser("list", aliases=["ls"], help="List and search learnings")
    ls.add_argument("-t", "--topic")
    ls.add_argument("-T", "--tags", nargs="+")
    ls.add_argument("-s", "--search")
    ls.add_argument("-l", "--limit", type=int)
    ls.add_argument("--scope", choices=["all", "global", "local"], default="all")

    get = sub.add_parser("get", aliases=["show"], help="Show a learning")
    get.add_argument("filename")

    add = sub.add_parser("add", help="Create a learning")
    add.add_argument("-f", "--filename", required=True)
    add.add_argument("-t", "--title", required=True)
    add.add_argument("--topic", required=True)
    add.add_argument("-o", "--one-liner", required=True)
    add.add_argument("-c", "--context", required=True)
    add.add_argument("-e", "--examples", required=True)
    add.add_argument("-T", "--tags", nargs="+")
    add.add_argument("-r", "--related", nargs="+")
    add.add_argument("-s", "--scope", choices=["global", "local"], default="global")

    rm = sub.add_parser("remove", aliases=["rm"], help="Delete a learning")
    rm.add_argument("filename")
    rm.add_argument("-s", "--scope", choices=["global", "local"], required=True)

    sub.add_parser("topics", help="Show topics and tags")
    sub.add_parser("serve", help="Run the MCP server on stdio")
    return parser


async def _run(config: LearningsConfig, args: argparse.Namespace) -> int:
    from learnings.scopes import ScopeOrchestrator
    from learnings.server import LearningsServer
    from learnings.tools.learning_tools import format_vocabulary, get_learning_tools

    orchestrator = ScopeOrchestrator.from_config(config)

    if args.command == "serve":
        await LearningsServer(orchestrator, config.default_limit).serve()
        return 0

    if args.command == "topics":
        print(format_vocabulary(await orchestrator.get_metadata()))
        return 0

    tools = get_learning_tools(orchestrator, config.default_limit)
    if args.command in ("list", "ls"):
        result = await tools["list_learnings"](
            topic=args.topic, tags=args.tags, search=args.search, limit=args.limit, scope=args.scope
        )
    elif args.command in ("get", "show"):
        result = await tools["get_learning"](args.filename)
    elif args.command == "add":
        result = await tools["add_learning"](
            filename=args.filename,
            title=args.title,
            topic=args.topic,
            one_liner=args.one_liner,
            context=args.context,
            examples=args.examples,
            tags=args.tags,
            related=args.related,
            scope=args.scope,
        )
    else:
        result = await tools["remove_learning"](args.filename, args.scope)

    print(result.text, file=sys.stderr if result.is_error else sys.stdout)
    return 1 if result.is_error else 0


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    config = load_config(
        repository=args.repository,
        clone_location=args.clone_location,
        local_folder=args.local_folder,
        log_level=args.log_level,
    )
    _setup_logging(config.log_level)

    try:
        code = asyncio.run(_run(config, args))
    except KeyboardInterrupt:
        code = 0
    except LearningsError as e:
        print(f"Error: {e}", file=sys.stderr)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
