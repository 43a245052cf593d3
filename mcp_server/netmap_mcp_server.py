"""
Optional: MCP server exposing the network map layout as tools.

Lets an MCP client check a controller snapshot and get back the laid-out
tree (model coordinates 0..100) without running the Tk viewer.

Run (example):
  pip install -e ".[mcp]"
  python mcp_server/netmap_mcp_server.py

Then connect an MCP client to:
  http://localhost:8000/mcp
"""

from __future__ import annotations

from typing import Any, Dict

from mcp.server.fastmcp import FastMCP

from netmap.export import layout_from_dict, sample_snapshot
from netmap.snapshot import validate_snapshot

mcp = FastMCP(
    "Netmap MCP Server",
    instructions="Tools for validating controller snapshots and laying out the network map tree.",
    stateless_http=True,
    json_response=True,
)


@mcp.tool()
def validate_snapshot_json(snapshot_json: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a snapshot object; returns problems list."""
    problems = validate_snapshot(snapshot_json)
    return {"ok": len(problems) == 0, "problems": problems}


@mcp.tool()
def layout_snapshot_json(snapshot_json: Dict[str, Any]) -> Dict[str, Any]:
    """Build the device/client tree and return every node with its x/y."""
    return layout_from_dict(snapshot_json)


@mcp.tool()
def generate_sample_snapshot() -> Dict[str, Any]:
    """Return a small example snapshot (gateway, switches, AP, clients)."""
    return sample_snapshot()


if __name__ == "__main__":
    # Streamable HTTP transport on localhost:8000/mcp
    mcp.run(transport="streamable-http")
