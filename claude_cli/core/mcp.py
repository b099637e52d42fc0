"""Registry of Model Context Protocol servers kept next to the config file."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import ConfigError

logger = logging.getLogger(__name__)

MCP_FILENAME = "mcp_servers.json"


@dataclass
class ToolParameter:
    type_name: str
    description: str
    required: bool
    default: Optional[Any] = None


@dataclass
class McpTool:
    name: str
    description: str
    parameters: Dict[str, ToolParameter] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "McpTool":
        return cls(
            name=data["name"],
            description=data["description"],
            parameters={
                key: ToolParameter(**param) for key, param in data.get("parameters", {}).items()
            },
        )


@dataclass
class McpServer:
    name: str
    url: str
    api_version: str
    tools: List[McpTool] = field(default_factory=list)
    enabled: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "McpServer":
        return cls(
            name=data["name"],
            url=data["url"],
            api_version=data["api_version"],
            tools=[McpTool.from_dict(t) for t in data.get("tools", [])],
            enabled=data.get("enabled", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class McpConfig:
    """The list of configured servers and the file it lives in."""

    def __init__(self, config_path: Path, servers: Optional[List[McpServer]] = None) -> None:
        self.config_path = Path(config_path)
        self.servers: List[McpServer] = servers or []

    @classmethod
    def load(cls, config_dir: Path) -> "McpConfig":
        path = Path(config_dir) / MCP_FILENAME
        if not path.exists():
            return cls(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            servers = [McpServer.from_dict(item) for item in raw]
        except (ValueError, KeyError, TypeError) as exc:
            raise ConfigError(f"{path} is not a valid MCP server list: {exc}") from exc
        return cls(path, servers)

    def save(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(
            json.dumps([s.to_dict() for s in self.servers], indent=2),
            encoding="utf-8",
        )

    def add_server(self, server: McpServer) -> None:
        """Add *server*, replacing an entry with the same name."""
        for idx, existing in enumerate(self.servers):
            if existing.name == server.name:
                self.servers[idx] = server
                break
        else:
            self.servers.append(server)
        self.save()
        logger.info("registered MCP server %r", server.name)

    def remove_server(self, name: str) -> None:
        self.servers = [s for s in self.servers if s.name != name]
        self.save()
        logger.info("removed MCP server %r", name)

    def enabled_servers(self) -> List[McpServer]:
        return [s for s in self.servers if s.enabled]
