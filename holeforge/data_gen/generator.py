"""
Batch hole generator.

Generates holes for a contiguous seed range and writes them as JSONL:
1. Sampling a hole configuration per seed
2. Building the layout and loading the hole
3. Recording configuration, layout, anchors and obstacles
4. Saving a manifest with generation statistics
"""

import argparse
import json
import logging
import random
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Optional

from tqdm import tqdm

from ..engine import HoleComposer, HoleConfigGenerator
from ..errors import HoleForgeError


logger = logging.getLogger(__name__)


class HoleDatasetGenerator:
    """
    Generates reproducible hole datasets.

    Sample ``i`` uses ``random.Random(seed + i)`` for its configuration, so
    any single hole can be regenerated from the manifest seed and its id.
    """

    def __init__(
        self,
        output_dir: str,
        seed: int = 42,
        target_distance: Optional[float] = None
    ):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self.seed = seed
        self.target_distance = target_distance
        self.composer = HoleComposer()

        # Track generation statistics
        self.stats = {
            "total_generated": 0,
            "failed": 0,
            "water_positions": Counter(),
            "obstacle_counts": Counter(),
            "bunker_counts": Counter(),
            "skipped_surfaces": 0,
        }

    def generate_sample(self, sample_id: int) -> Dict[str, Any]:
        """Generate one hole record."""

        rng = random.Random(self.seed + sample_id)
        config = HoleConfigGenerator(rng).generate(self.target_distance)
        hole = self.composer.compose(config)
        summary = hole.summary()

        self._update_stats(config, summary)

        return {
            "id": sample_id,
            "seed": self.seed + sample_id,
            "config": config.to_payload(),
            "layout": hole.layout.to_dict(),
            "flag_position": summary["flag_position"],
            "green_center": summary["green_center"],
            "green_radius": summary["green_radius"],
            "obstacles": summary["obstacles"],
        }

    def _update_stats(self, config, summary: Dict[str, Any]):
        stats = self.stats
        stats["total_generated"] += 1
        water = config.water_hazard
        stats["water_positions"][water.position if water else "none"] += 1
        stats["obstacle_counts"][len(summary["obstacles"])] += 1
        stats["bunker_counts"][len(summary["surfaces"]["bunkers"])] += 1
        stats["skipped_surfaces"] += len(summary["skipped_surfaces"])

    def generate_dataset(self, num_samples: int, output_name: str = "holes.jsonl") -> str:
        """
        Generate complete dataset.

        Args:
            num_samples: Number of holes to generate
            output_name: JSONL file name inside the output directory

        Returns:
            Path to generated dataset manifest
        """

        logger.info("Generating %d holes to %s", num_samples, self.output_dir)

        dataset_path = self.output_dir / output_name
        with open(dataset_path, "w") as outfile:
            for i in tqdm(range(num_samples), desc="Generating holes"):
                try:
                    sample = self.generate_sample(i)
                except (HoleForgeError, ValueError) as e:
                    self.stats["failed"] += 1
                    logger.error("Error generating hole %d: %s", i, e)
                    continue
                outfile.write(json.dumps(sample, separators=(",", ":")) + "\n")

        manifest = {
            "dataset_info": {
                "total_samples": num_samples,
                "base_seed": self.seed,
                "target_distance": self.target_distance,
                "output_dir": str(self.output_dir),
                "generation_stats": self._stats_to_json(),
            },
            "dataset_file": dataset_path.name,
        }

        manifest_path = self.output_dir / "dataset_manifest.json"
        with open(manifest_path, "w") as f:
            json.dump(manifest, f, indent=2)

        return str(manifest_path)

    def _stats_to_json(self) -> Dict[str, Any]:
        return {
            key: {str(k): v for k, v in sorted(value.items(), key=lambda item: str(item[0]))}
            if isinstance(value, Counter) else value
            for key, value in self.stats.items()
        }


def main():
    """CLI entry point for dataset generation."""

    parser = argparse.ArgumentParser(description="Generate a dataset of procedural golf holes")
    parser.add_argument("--n", type=int, default=100, help="Number of holes to generate")
    parser.add_argument("--output", type=str, required=True, help="Output directory")
    parser.add_argument("--seed", type=int, default=42, help="Base random seed")
    parser.add_argument("--distance", type=float, default=None,
                        help="Fixed target distance in meters (random 110-183 when omitted)")
    parser.add_argument("--verbose", action="store_true", help="Log per-hole details")

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    generator = HoleDatasetGenerator(
        output_dir=args.output,
        seed=args.seed,
        target_distance=args.distance
    )

    manifest_path = generator.generate_dataset(num_samples=args.n)

    stats = generator.stats
    print(f"\nDataset generated successfully!")
    print(f"Holes written: {stats['total_generated']} ({stats['failed']} failed)")
    print(f"Water hazards: {dict(stats['water_positions'])}")
    print(f"Manifest saved to: {manifest_path}")


if __name__ == "__main__":
    main()
