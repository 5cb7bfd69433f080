import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from plant_knowledge.domain.mention_extractor import extract_mentions
from plant_knowledge.infra.config import get_config
from plant_knowledge.infra.errors import PlantApiError
from plant_knowledge.observability.logging_utils import init_logging, trace_scope
from plant_knowledge.prompts.plant_formatters import (
    format_plant_care_guide,
    format_plant_for_data,
)
from plant_knowledge.runtime import PlantKnowledgeRuntime


def _print_mentions(text: str) -> List[str]:
    mentions = extract_mentions(text)
    if not mentions:
        print("No plant mentions found.")
        return []
    for mention in mentions:
        print(
            f"- {mention.normalized_name} "
            f"[{mention.confidence}, {mention.source}] from {mention.original_text!r}"
        )
    return [mention.normalized_name for mention in mentions if mention.confidence != "low"]


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Find and look up plants mentioned in text.")
    parser.add_argument("--text", required=True, help="Message text to scan for plants.")
    parser.add_argument(
        "--resolve",
        action="store_true",
        help="Resolve each mention against the Trefle API.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print resolved plants as structured JSON instead of care guides.",
    )
    args = parser.parse_args(argv)

    cfg = get_config()
    init_logging(log_path=cfg.log_path)

    names = _print_mentions(args.text)
    if not args.resolve or not names:
        return 0

    with PlantKnowledgeRuntime(cfg) as runtime:
        if not runtime.is_configured():
            raise SystemExit("TREFLE_TOKEN is not set; cannot resolve plants.")
        resolver = runtime.session("cli").resolver
        records = []
        with trace_scope():
            for name in names:
                try:
                    plant = resolver.resolve_by_name(name)
                except PlantApiError as exc:
                    print(f"\n{name}: lookup failed ({exc})", file=sys.stderr)
                    continue
                if plant is None:
                    print(f"\n{name}: not found", file=sys.stderr)
                    continue
                if args.json:
                    records.append(format_plant_for_data(plant))
                else:
                    print()
                    print(format_plant_care_guide(plant))
        if args.json:
            print(json.dumps(records, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
