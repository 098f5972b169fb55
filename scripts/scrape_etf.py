#!/usr/bin/env python3
"""
Scrape spot-ETF flow tables and save the snapshot as JSON.

Output goes to docs/data/etf-flows.json unless ETF_OUTPUT_PATH is set.
"""

import asyncio
import json
import os
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from trend_radar.etf import fetch_etf_flows  # noqa: E402
from trend_radar.observability.logging import setup_logging  # noqa: E402

DEFAULT_OUTPUT = Path(__file__).parent.parent / "docs" / "data" / "etf-flows.json"


async def main():
    setup_logging(level=os.getenv("LOG_LEVEL", "INFO"))

    print("=" * 80)
    print("SCRAPING ETF FLOWS")
    print(f"Time: {datetime.utcnow().isoformat()}")
    print("=" * 80)

    snapshot = await fetch_etf_flows()

    output = Path(os.getenv("ETF_OUTPUT_PATH", DEFAULT_OUTPUT))
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(snapshot, indent=2))
    print(f"Data saved to {output}")

    print("\n=== Summary ===")
    for asset in ("bitcoin", "ethereum", "solana"):
        print(f"{asset.capitalize()}: {snapshot.get(f'{asset}_summary')}")

    failed = [a for a in ("bitcoin", "ethereum", "solana") if snapshot.get(a) is None]
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
