#!/usr/bin/env python3
"""
lumentrace - A Python Monte Carlo Path Tracer

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

import numpy as np

from lumentrace.renderer import Renderer, RenderSettings, EXECUTORS
from lumentrace.scenes import SCENES
from lumentrace.scene_parser import load_scene, SceneParseError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='lumentrace - A Python Monte Carlo Path Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene basic --output render.png
  python main.py --width 640 --height 360 --samples 200 --workers 8 --executor process
  python main.py --scene-file scenes/bubble.yaml --seed 7 --output bubble.png
        '''
    )

    parser.add_argument('--width', type=int, default=400, help='Image width (default: 400)')
    parser.add_argument('--height', type=int, default=225, help='Image height (default: 225)')
    parser.add_argument('--samples', type=int, default=100, help='Samples per pixel (default: 100)')
    parser.add_argument('--depth', type=int, default=50, help='Max bounce depth (default: 50)')
    parser.add_argument('--workers', type=int, default=0, help='Number of row bands / workers (0=auto)')
    parser.add_argument('--executor', type=str, default='thread', choices=EXECUTORS,
                        help='Worker pool kind (default: thread)')
    parser.add_argument('--seed', type=int, default=None, help='Seed for reproducible renders')
    parser.add_argument('--scene', type=str, default='basic', choices=sorted(SCENES),
                        help='Built-in scene to render (default: basic)')
    parser.add_argument('--scene-file', type=str, default=None,
                        help='JSON or YAML scene file (overrides --scene and the size options)')
    parser.add_argument('--no-gamma', action='store_true', help='Skip square-root gamma correction')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('--verbose', action='store_true', help='Log per-band progress')
    return parser


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )

    # Print header
    print("=" * 60)
    print("lumentrace Path Tracer")
    print("=" * 60)

    try:
        if args.scene_file:
            print(f"\nLoading scene file: {args.scene_file}")
            world, camera, settings = load_scene(args.scene_file)
        else:
            settings = RenderSettings(
                width=args.width,
                height=args.height,
                samples_per_pixel=args.samples,
                max_depth=args.depth,
                num_workers=args.workers,
                seed=args.seed,
                gamma_correct=not args.no_gamma,
                executor=args.executor
            )
            print(f"\nCreating scene: {args.scene}")
            build_scene, build_camera = SCENES[args.scene]
            if args.scene == 'random':
                world = build_scene(np.random.default_rng(args.seed))
            else:
                world = build_scene()
            camera = build_camera(settings.aspect_ratio)
    except (SceneParseError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\nRender Settings:")
    print(f"  Resolution: {settings.width}x{settings.height}")
    print(f"  Samples: {settings.samples_per_pixel}")
    print(f"  Max Depth: {settings.max_depth}")
    print(f"  Workers: {settings.num_workers} ({settings.executor})")
    print(f"  Objects in scene: {len(world)}")

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    # Render
    print("\nRendering...")
    start_time = time.time()

    image = renderer.render(world, camera)

    elapsed = max(time.time() - start_time, 1e-9)
    print(f"\nRender completed in {elapsed:.2f} seconds")
    print(f"  Samples per second: {(settings.width * settings.height * settings.samples_per_pixel) / elapsed:.0f}")

    # Ensure output directory exists
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"\nSaving to: {args.output}")
    renderer.save_image(image, str(output_path))

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
