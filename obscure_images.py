from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from tqdm import tqdm

from pixelguard.config.settings import get_settings
from pixelguard.engine.errors import ObscurationError
from pixelguard.engine.pipeline import ObscurationPipeline
from pixelguard.engine.pixelate import SAMPLING_MODES
from pixelguard.utils.imageio import IMAGE_EXTS, load_image, save_image
from pixelguard.utils.log import configure_logging

logger = logging.getLogger("obscure_images")


def collect_images(root: Path, recursive: bool = False) -> List[Tuple[Path, Path]]:
    """Return (source, relative output path) pairs for every image under root."""
    if root.is_file():
        return [(root, Path(root.name))]

    pattern = root.rglob("*") if recursive else root.glob("*")
    items = [
        (p, p.relative_to(root))
        for p in pattern
        if p.is_file() and p.suffix.lower() in IMAGE_EXTS
    ]
    return sorted(items)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Pixelate every face found in an image or a folder of images.")
    ap.add_argument("--input", required=True, help="Image file or folder of images")
    ap.add_argument("--out", default="obscured", help="Output folder (default: obscured)")
    ap.add_argument("--recursive", action="store_true", help="Walk sub-folders of --input")
    ap.add_argument("--sampling", choices=SAMPLING_MODES, default=None,
                    help="Block colour: middle pixel (center) or block average (mean)")
    ap.add_argument("--parallel", action="store_true", help="Pixelate while faces are being detected")
    ap.add_argument("--log-level", default=None, help="Override PIXELGUARD_LOG_LEVEL")
    return ap


def main(argv: Optional[Sequence[str]] = None, pipeline: Optional[ObscurationPipeline] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    in_root = Path(args.input)
    out_root = Path(args.out)
    if not in_root.exists():
        raise FileNotFoundError(in_root)

    if pipeline is None:
        settings = get_settings()
        if args.sampling:
            settings = replace(settings, pixel_sampling=args.sampling)
        if args.parallel:
            settings = replace(settings, parallel=True)
        pipeline = ObscurationPipeline.from_settings(settings)

    items = collect_images(in_root, recursive=args.recursive)
    if not items:
        print(f"No images found under: {in_root}")
        return 1

    n_ok = 0
    n_faces = 0
    failed: List[Path] = []

    for src, rel in tqdm(items, desc="Obscuring faces"):
        try:
            result = pipeline.run(load_image(src))
            save_image(out_root / rel, result.image)
        except (ObscurationError, OSError) as e:
            logger.error("Skipping %s: %s", src, e)
            failed.append(src)
            continue
        n_ok += 1
        n_faces += len(result.faces)

    print(f"Processed: {n_ok}")
    print(f"Faces:     {n_faces}")
    print(f"Failed:    {len(failed)}")
    print(f"Output: {out_root.resolve()}")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
