#!/usr/bin/env python3
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

print(
    f"[mcp] driver={os.environ.get('MCP_TAURI_DRIVER', '~/.cargo/bin/tauri-driver')} | "
    f"port={os.environ.get('MCP_TAURI_PORT', '4444')} | "
    f"wait_timeout_ms={os.environ.get('MCP_TAURI_WAIT_TIMEOUT_MS', '10000')}",
    file=sys.stderr,
)

from mcp_servers.tauri.main import main  # noqa: E402

if __name__ == "__main__":
    main()
