"""
MCP Server: learnings, personal learnings over JSON-RPC 2.0 on stdio (NDJSON).

Exposes the learning tools (list/get/add/remove) and two prompts
(learning_guidelines, create_learning). Requests are handled one at a time.

Usage:
  python -m learnings --repository <path-or-url> serve
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import TYPE_CHECKING, Any

from learnings.prompts import LEARNING_GUIDELINES, build_learning_prompt
from learnings.tools.learning_tools import get_learning_tools

if TYPE_CHECKING:
    from learnings.models import TopicsAndTags
    from learnings.scopes import ScopeOrchestrator

logger = logging.getLogger(__name__)

# ── Constants ────────────────────────────────────────────────

SERVER_NAME = "learnings"
SERVER_VERSION = "1.0.0"
PROTOCOL_VERSION = "2024-11-05"

TOPICS_PREVIEW = 5
TAGS_PREVIEW = 8

_STRING = {"type": "string"}
_STRING_LIST = {"type": "array", "items": {"type": "string"}}
_SCOPE = {"type": "string", "enum": ["global", "local"]}

# ── Tool and prompt definitions ──────────────────────────────


def _preview(items: list[str], size: int) -> str:
    text = ", ".join(items[:size])
    return text + ("..." if len(items) > size else "")


def build_tools(vocab: TopicsAndTags, default_limit: int = 6) -> list[dict]:
    """Tool schemas. The list description advertises the known vocabulary."""
    return [
        {
            "name": "list_learnings",
            "description": (
                "Search and list learnings by topic, tags, or text search. "
                f"Available topics: {_preview(vocab.topics, TOPICS_PREVIEW)}. "
                f"Available tags: {_preview(vocab.tags, TAGS_PREVIEW)}."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "topic": {**_STRING, "description": "Filter by topic"},
                    "tags": {**_STRING_LIST, "description": "Filter by tags (must have all)"},
                    "search": {**_STRING, "description": "Text search in title and content"},
                    "limit": {
                        "type": "number",
                        "description": f"Maximum number of results (default: {default_limit})",
                    },
                    "scope": {
                        "type": "string",
                        "enum": ["all", "global", "local"],
                        "description": "Which scope to search (default: all)",
                    },
                },
            },
        },
        {
            "name": "get_learning",
            "description": "Fetch the full content of a learning by filename",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "filename": {
                        **_STRING,
                        "description": "The filename of the learning (e.g., 'git-rebase.md')",
                    },
                },
                "required": ["filename"],
            },
        },
        {
            "name": "add_learning",
            "description": (
                "Create a new learning. Before using this tool, read the "
                "'learning_guidelines' or 'create_learning' prompt for the expected structure."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "filename": {**_STRING, "description": "Format: {context}-{short-title}.md"},
                    "title": {**_STRING, "description": "Short descriptive title"},
                    "topic": {**_STRING, "description": "Main topic/category"},
                    "tags": {**_STRING_LIST, "description": "Tags for categorization"},
                    "one_liner": {**_STRING, "description": "One-line description"},
                    "context": {**_STRING, "description": "When/why to use this"},
                    "examples": {**_STRING, "description": "Code snippets and examples"},
                    "related": {**_STRING_LIST, "description": "Related learning filenames"},
                    "scope": {**_SCOPE, "description": "Where to store it (default: global)"},
                },
                "required": ["filename", "title", "topic", "one_liner", "context", "examples"],
            },
        },
        {
            "name": "remove_learning",
            "description": "Delete a learning by filename",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "filename": {**_STRING, "description": "The filename of the learning to delete"},
                    "scope": {**_SCOPE, "description": "Where to delete it from"},
                },
                "required": ["filename", "scope"],
            },
        },
    ]


PROMPTS = [
    {
        "name": "learning_guidelines",
        "description": "Guidelines and best practices for creating well-structured learnings",
        "arguments": [],
    },
    {
        "name": "create_learning",
        "description": "Interactive template for creating a new learning",
        "arguments": [
            {"name": "title", "description": "Learning title", "required": False},
            {"name": "topic", "description": "Learning topic", "required": False},
            {"name": "context", "description": "Initial context", "required": False},
        ],
    },
]

# ── JSON-RPC 2.0 helpers ─────────────────────────────────────


def jsonrpc_result(req_id, result):
    return {"jsonrpc": "2.0", "id": req_id, "result": result}


def jsonrpc_error(req_id, code, message):
    return {"jsonrpc": "2.0", "id": req_id, "error": {"code": code, "message": message}}


def _text_content(text: str, is_error: bool = False) -> dict:
    result: dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if is_error:
        result["isError"] = True
    return result


# ── Server ───────────────────────────────────────────────────


class LearningsServer:
    """Serial JSON-RPC request handler bound to one orchestrator."""

    def __init__(self, orchestrator: ScopeOrchestrator, default_limit: int = 6) -> None:
        self.orchestrator = orchestrator
        self.default_limit = default_limit
        self.tools = get_learning_tools(orchestrator, default_limit)

    async def handle_request(self, req: dict) -> dict | None:
        req_id = req.get("id")
        method = req.get("method", "")

        # Notifications have no id and get no response
        if req_id is None:
            if method == "notifications/initialized":
                logger.info("Client initialized")
            return None

        if method == "initialize":
            return jsonrpc_result(req_id, {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {}, "prompts": {}},
                "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
            })

        if method == "tools/list":
            vocab = await self.orchestrator.get_metadata()
            return jsonrpc_result(req_id, {"tools": build_tools(vocab, self.default_limit)})

        if method == "tools/call":
            params = req.get("params", {})
            return jsonrpc_result(
                req_id, await self._call_tool(params.get("name", ""), params.get("arguments", {}))
            )

        if method == "prompts/list":
            return jsonrpc_result(req_id, {"prompts": PROMPTS})

        if method == "prompts/get":
            params = req.get("params", {})
            name = params.get("name", "")
            if name == "learning_guidelines":
                text = LEARNING_GUIDELINES
            elif name == "create_learning":
                args = params.get("arguments", {})
                text = build_learning_prompt(args.get("title"), args.get("topic"), args.get("context"))
            else:
                return jsonrpc_error(req_id, -32602, f"Unknown prompt: {name}")
            return jsonrpc_result(req_id, {
                "messages": [{"role": "user", "content": {"type": "text", "text": text}}],
            })

        return jsonrpc_error(req_id, -32601, f"Method not found: {method}")

    async def _call_tool(self, name: str, args: dict) -> dict:
        tool = self.tools.get(name)
        if tool is None:
            return _text_content(f"Unknown tool: {name}", is_error=True)
        try:
            result = await tool(**args)
        except TypeError as e:
            return _text_content(f"Invalid arguments for {name}: {e}", is_error=True)
        except Exception as e:
            logger.exception("Tool %s failed", name)
            return _text_content(f"Internal error: {e}", is_error=True)
        return _text_content(result.text, result.is_error)

    async def serve(self) -> None:
        """Read NDJSON requests from stdin, write responses to stdout."""
        logger.info("Starting %s server", SERVER_NAME)

        reader = asyncio.StreamReader()
        protocol = asyncio.StreamReaderProtocol(reader)
        await asyncio.get_running_loop().connect_read_pipe(lambda: protocol, sys.stdin)

        while True:
            line = await reader.readline()
            if not line:
                break
            line = line.decode("utf-8").strip()
            if not line:
                continue

            try:
                req = json.loads(line)
                logger.debug("<- %s", req.get("method", "?"))
                response = await self.handle_request(req)
                if response:
                    sys.stdout.write(json.dumps(response) + "\n")
                    sys.stdout.flush()
            except json.JSONDecodeError as e:
                logger.error("Parse error: %s", e)
            except Exception as e:
                logger.error("Handler error: %s", e)
