# main.py
"""
Command line entry point: build a scene, render it and write the image.

    pathtracer --scene cornell_box --quality preview --output cornell.png
"""
import argparse
import logging
import sys
from typing import List, Optional

from tqdm import tqdm

from pathtracer.config import DEFAULT_ASPECT_RATIO, QUALITY_LEVELS, RenderSettings, setup_logging
from pathtracer.renderer.output import save_image
from pathtracer.renderer.raytracer import Renderer, RenderWorkerError
from pathtracer.scenes import SCENES, build_scene, obj_scene

logger = logging.getLogger("pathtracer.main")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pathtracer",
        description="Render a scene with a multithreaded CPU path tracer.",
    )
    parser.add_argument("--scene", choices=sorted(SCENES), default="random_spheres",
                        help="built-in scene to render (default: random_spheres)")
    parser.add_argument("--obj", metavar="PATH", default=None,
                        help="render a Wavefront OBJ model instead of a built-in scene")
    parser.add_argument("--quality", choices=list(QUALITY_LEVELS), default="balanced",
                        help="preset for width, samples and bounce depth (default: balanced)")
    parser.add_argument("--width", type=int, default=None, help="image width in pixels")
    parser.add_argument("--aspect-ratio", type=float, default=DEFAULT_ASPECT_RATIO,
                        help="width / height (default: 16/9)")
    parser.add_argument("--samples", type=int, default=None, help="samples per pixel")
    parser.add_argument("--max-depth", type=int, default=None, help="maximum bounces per path")
    parser.add_argument("--workers", type=int, default=None,
                        help="render threads (default: one per CPU)")
    parser.add_argument("--samples-per-pass", type=int, default=1,
                        help="samples a worker renders between merges (default: 1)")
    parser.add_argument("--seed", type=int, default=None, help="seed for reproducible renders")
    parser.add_argument("--output", "-o", default="image.ppm",
                        help="output file; .ppm is written directly, other formats via Pillow")
    parser.add_argument("--verbose", "-v", action="store_true", help="enable debug logging")
    parser.add_argument("--no-progress", action="store_true", help="hide the progress bar")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> RenderSettings:
    return RenderSettings.from_quality(
        args.quality,
        width=args.width,
        aspect_ratio=args.aspect_ratio,
        samples_per_pixel=args.samples,
        max_depth=args.max_depth,
        workers=args.workers,
        samples_per_pass=args.samples_per_pass,
        seed=args.seed,
        scene=args.scene,
        output=args.output,
    )


def render(settings: RenderSettings, obj_path: Optional[str] = None, show_progress: bool = True):
    if obj_path is not None:
        scene = obj_scene(obj_path, settings.aspect_ratio)
    else:
        scene = build_scene(settings.scene, settings.aspect_ratio, settings.seed)

    with tqdm(total=100, unit="%", desc="Rendering", disable=not show_progress) as bar:
        def on_progress(percent: int):
            bar.update(percent - bar.n)

        renderer = Renderer(
            scene,
            settings.width,
            settings.height,
            settings.samples_per_pixel,
            max_depth=settings.max_depth,
            workers=settings.workers,
            samples_per_pass=settings.samples_per_pass,
            seed=settings.seed,
            progress=on_progress,
        )
        result = renderer.render()

    save_image(settings.output, result.to_rgb8())
    return result


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = build_settings(args)
        logger.info("Settings: %r", settings)
        result = render(settings, obj_path=args.obj, show_progress=not args.no_progress)
    except (ValueError, OSError, RenderWorkerError) as e:
        logger.error("Render failed: %s", e)
        return 1

    logger.info("Done in %.2fs, image written to %s", result.elapsed, settings.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
