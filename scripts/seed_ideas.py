# scripts/seed_ideas.py
"""
Fill the idea pool for one language from the command line.

  python scripts/seed_ideas.py --lang en --target 200 --batch 40 --seed "camel milk" --seed "lactose"
"""
import json
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in os.sys.path:
    os.sys.path.insert(0, str(ROOT))

from articlegen.config import Settings, configure_logging
from articlegen.errors import ArticleGenError, UpstreamError
from articlegen.llm import StructuredClient
from articlegen.seeding import IdeaSeeder


def main(lang: str, target: int, batch: int, seeds: list[str], env_file: str | None = None) -> int:
    settings = Settings.from_env(env_file)
    configure_logging(settings)
    seeder = IdeaSeeder(StructuredClient(settings), settings)
    try:
        result = seeder.seed(lang, target, batch, seeds)
    except UpstreamError as e:
        progress = e.progress.model_dump() if e.progress else None
        print(json.dumps({"error": str(e), "status": e.status_code, "progress": progress}, ensure_ascii=False))
        return 2
    except ArticleGenError as e:
        print(json.dumps({"error": str(e)}, ensure_ascii=False))
        return 1
    print(json.dumps(result.model_dump(), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    import argparse

    ap = argparse.ArgumentParser(description="Seed the idea pool for a language.")
    ap.add_argument("--lang", default="en")
    ap.add_argument("--target", type=int, default=100)
    ap.add_argument("--batch", type=int, default=40)
    ap.add_argument("--seed", action="append", default=[], help="Seed topic (repeatable)")
    ap.add_argument("--env-file", default=None)
    args = ap.parse_args()
    sys.exit(main(args.lang, args.target, args.batch, args.seed, args.env_file))
