#!/usr/bin/env python3
"""
Render preview tool for tutorial overlays.

Renders the overlay a tutorial would show onto a screenshot (or a live
monitor capture) and writes the result as an image, without a host window.

The tour file is JSON:

    {
        "config": {"tutorial_id": "home_tour", "overlay_color": "#000000D0"},
        "tree": {"bounds": {...}, "children": [{"tag": "new_button", "bounds": {...}}]},
        "steps": [{"target_tag": "new_button", "text": "Start here", "shape": "circle"}]
    }

"tree" uses the ViewNode layout with bounds in screenshot pixels; "config"
is optional and takes any TutorialConfig field.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import cv2

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from spotlight_tour.capture.screen_capture import MssSnapshotProvider
from spotlight_tour.config.settings import Settings
from spotlight_tour.config.tunables import TooltipLayoutSettings
from spotlight_tour.errors import TutorialError
from spotlight_tour.models import ImageBuffer, Step, TutorialConfig, ViewNode
from spotlight_tour.overlay.renderer import CompositingRenderer
from spotlight_tour.resolver.target_resolver import TargetResolver

logger = logging.getLogger(__name__)


def load_tour(tour_file: Path):
    """Load config, UI tree and steps from a tour JSON file."""
    with open(tour_file, 'r', encoding='utf-8') as f:
        data = json.load(f)

    config = TutorialConfig(**data.get("config", {}))
    tree = ViewNode(**data["tree"])
    steps = [Step(**step) for step in data["steps"]]
    return config, tree, steps


def load_snapshot(args) -> ImageBuffer:
    if args.monitor is not None:
        with MssSnapshotProvider(monitor_index=args.monitor) as provider:
            snapshot = provider.capture_root_snapshot()
        if snapshot is None:
            raise RuntimeError(f"Could not capture monitor {args.monitor}")
        return snapshot

    image = cv2.imread(str(args.screenshot), cv2.IMREAD_COLOR)
    if image is None:
        raise RuntimeError(f"Could not read screenshot: {args.screenshot}")
    return ImageBuffer(image, label="snapshot")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Render a tutorial overlay onto a screenshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python tools/render_preview.py tour.json --screenshot home.png -o preview.png
  python tools/render_preview.py tour.json --monitor 1 --density 2.0
  python tools/render_preview.py tour.json --screenshot home.png --settings data/settings.json
        """
    )

    parser.add_argument('tour', type=Path, help='Tour JSON file')

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--screenshot', '-s', type=Path, help='Screenshot to draw on')
    source.add_argument('--monitor', '-m', type=int, help='Capture this monitor instead (mss index)')

    parser.add_argument(
        '--output', '-o',
        type=Path,
        default=Path('overlay_preview.png'),
        help='Output image (default: overlay_preview.png)'
    )

    parser.add_argument(
        '--density', '-d',
        type=float,
        default=1.0,
        help='Pixels per dp (default: 1.0)'
    )

    parser.add_argument(
        '--font-scale',
        type=float,
        default=None,
        help='Pixels per sp (default: same as --density)'
    )

    parser.add_argument(
        '--settings',
        type=Path,
        default=None,
        help='Settings file with renderer.* overrides'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    args = parser.parse_args()

    # Setup logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s [%(levelname)8s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    try:
        config, tree, steps = load_tour(args.tour)
        snapshot = load_snapshot(args)
    except (OSError, RuntimeError, KeyError, ValueError, TutorialError) as e:
        logger.error(f"Failed to load inputs: {e}")
        return 1

    layout = None
    if args.settings is not None:
        layout = TooltipLayoutSettings.from_settings(Settings(args.settings))

    report = TargetResolver().resolve(tree, steps)
    for entry in report.unresolved():
        logger.warning(f"Skipping {entry}")
    if not report.targets:
        logger.error("No step resolved against the tree, nothing to render")
        return 1

    renderer = CompositingRenderer(layout)
    result = renderer.render(snapshot.pixels, report.targets, config.overlay_color, config.style,
                             args.density, args.font_scale)
    snapshot.release()

    if not cv2.imwrite(str(args.output), result):
        logger.error(f"Could not write {args.output}")
        return 1

    print(f"Rendered {report.resolved_count} of {len(steps)} steps to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
