"""
Build or refresh the embedding cache from the command line.

Usage:
    python -m ytravel_rag.rag.build_cache           # load or build
    python -m ytravel_rag.rag.build_cache --force   # discard and rebuild
"""

import argparse
import asyncio
import sys

from ytravel_rag.config import Config
from ytravel_rag.rag.query_service import initialize_rag_system


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Build the Y-Travels embedding cache")
    parser.add_argument("--force", action="store_true", help="Rebuild even if a valid cache exists")
    args = parser.parse_args(argv)

    Config.setup_logging()
    Config.display()
    if not Config.validate():
        return 1

    service = initialize_rag_system()
    ready = asyncio.run(service.warm_up(force_rebuild=args.force))
    if not ready:
        return 1

    print(f"✅ {len(service.corpus.snapshot.documents)} documents embedded")
    return 0


if __name__ == "__main__":
    sys.exit(main())
