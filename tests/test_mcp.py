import json
import tempfile
import unittest
from pathlib import Path

from claude_cli.core import ConfigError
from claude_cli.core.mcp import MCP_FILENAME, McpConfig, McpServer, McpTool, ToolParameter


def _server(name, enabled=False, url="http://localhost:8000"):
    return McpServer(
        name=name,
        url=url,
        api_version="2024-11-05",
        tools=[
            McpTool(
                name="search",
                description="Search documents",
                parameters={"query": ToolParameter("string", "Search text", True)},
            )
        ],
        enabled=enabled,
    )


class TestMcpConfig(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_file_is_empty(self):
        self.assertEqual(McpConfig.load(self.dir).servers, [])

    def test_add_replaces_same_name(self):
        registry = McpConfig.load(self.dir)
        registry.add_server(_server("docs"))
        registry.add_server(_server("docs", url="http://localhost:9000"))

        reloaded = McpConfig.load(self.dir)
        self.assertEqual(len(reloaded.servers), 1)
        self.assertEqual(reloaded.servers[0].url, "http://localhost:9000")
        self.assertEqual(reloaded.servers[0].tools[0].parameters["query"].type_name, "string")

    def test_remove_and_enabled(self):
        registry = McpConfig.load(self.dir)
        registry.add_server(_server("docs", enabled=True))
        registry.add_server(_server("files"))

        self.assertEqual([s.name for s in registry.enabled_servers()], ["docs"])

        registry.remove_server("docs")
        self.assertEqual([s.name for s in McpConfig.load(self.dir).servers], ["files"])

    def test_malformed_file(self):
        (self.dir / MCP_FILENAME).write_text(json.dumps([{"name": "x"}]))
        with self.assertRaises(ConfigError):
            McpConfig.load(self.dir)
