"""Send test submissions with randomized counts to the configured webhook.

Renders the template with the configured assets, posts it to
DISCORD_WEBHOOK_URL, records the submission in the analytics log tagged
with the scenario name, and prints the results as JSON on stdout.

With --dry-run the images are only written to --output; nothing is
uploaded and nothing is recorded.

Scenarios:
    all     every catalog item gets a count (1-30)
    sparse  fewer than 10 items get a count
    random  a random number of items get a count
    stats   print the analytics summary only

Usage:
    send_test_submission.py [all|sparse|random|stats] [--dry-run] [--output DIR]
"""

import argparse
import json
import random
import sys
from pathlib import Path
from typing import Dict, List

from config import Config
from core.catalog import CATALOG, item_names
from services.image_generator import ImageGenerationOptions, create_image_generator
from services.submission_recorder import create_submission_recorder
from services.upload_client import UploadConfig, create_upload_client

MAX_RANDOM_COUNT = 30
SPARSE_MAX_ITEMS = 9
SCENARIOS = ("all", "sparse", "random")


def build_counts(scenario: str, rng: random.Random) -> Dict[str, int]:
    """Catalog counts for a scenario; unselected items stay at 0."""
    names = item_names(CATALOG)

    if scenario == "all":
        selected = names
    elif scenario == "sparse":
        selected = rng.sample(names, rng.randint(1, SPARSE_MAX_ITEMS))
    else:
        selected = rng.sample(names, rng.randint(1, len(names)))

    counts = {name: 0 for name in names}
    for name in selected:
        counts[name] = rng.randint(1, MAX_RANDOM_COUNT)
    return counts


def run_scenario(scenario: str, generator, client, recorder, rng, dry_run: bool, output: Path) -> dict:
    counts = build_counts(scenario, rng)
    with_values = sum(1 for value in counts.values() if value > 0)
    print(f"[{scenario}] {with_values} items with values", file=sys.stderr)

    image = generator.generate_image(counts, CATALOG)
    if not image.success:
        return {"scenario": scenario, "success": False, "error": image.error}

    result = {"scenario": scenario, "filename": image.filename, "size": image.size}

    if dry_run:
        output.mkdir(parents=True, exist_ok=True)
        target = output / image.filename
        target.write_bytes(image.image)
        print(f"[{scenario}] Wrote {target}", file=sys.stderr)
        result["success"] = True
        result["path"] = str(target)
        return result

    upload = client.upload_image(image.image, image.filename, f"Test submission ({scenario})")
    result.update(upload.to_dict())

    submission_id = recorder.record_submission(
        counts,
        channel="discord",
        channel_success=upload.success,
        scenario=scenario,
    )
    result["submissionId"] = submission_id
    return result


def main(argv: List[str] = None) -> int:
    parser = argparse.ArgumentParser(description="Send test laundry submissions")
    parser.add_argument("scenario", nargs="?", choices=SCENARIOS + ("stats",),
                        help="Scenario to run (default: all three)")
    parser.add_argument("--dry-run", action="store_true",
                        help="Render images locally instead of uploading")
    parser.add_argument("--output", type=Path, default=Path("output"),
                        help="Directory for --dry-run images")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    args = parser.parse_args(argv)

    recorder = create_submission_recorder(Config.ANALYTICS_DB_PATH)

    try:
        if args.scenario == "stats":
            print(json.dumps(recorder.get_summary().to_dict(), indent=2))
            return 0

        client = create_upload_client(
            UploadConfig(
                webhook_url=Config.DISCORD_WEBHOOK_URL,
                max_retries=Config.UPLOAD_MAX_RETRIES,
                retry_delay_ms=Config.UPLOAD_RETRY_DELAY_MS,
                timeout_ms=Config.UPLOAD_TIMEOUT_MS,
            ),
            backend=Config.UPLOAD_BACKEND,
        )
        problems = client.validate_configuration()
        if problems and not args.dry_run:
            print(f"ERROR: {', '.join(problems)}", file=sys.stderr)
            return 1

        generator = create_image_generator(ImageGenerationOptions(
            template_path=Config.TEMPLATE_IMAGE_PATH,
            signature_path=Config.SIGNATURE_IMAGE_PATH,
            font_size=Config.FONT_SIZE,
            font_family=Config.FONT_FAMILY,
            font_path=Config.FONT_PATH,
        ))

        rng = random.Random(args.seed)
        scenarios = [args.scenario] if args.scenario else list(SCENARIOS)
        results = [
            run_scenario(name, generator, client, recorder, rng, args.dry_run, args.output)
            for name in scenarios
        ]

        print(json.dumps(results, indent=2))
        return 0 if all(result.get("success") for result in results) else 1

    finally:
        recorder.database.close()


if __name__ == "__main__":
    sys.exit(main())
