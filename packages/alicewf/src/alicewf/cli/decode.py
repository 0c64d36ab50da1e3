from __future__ import annotations
import argparse, logging, sys
from pathlib import Path
from PIL import Image

from aliceproc import to_u8

from .common import setup_logging, ensure_dir, add_logging_args
from ..config import DecoderConfig
from ..decoder import Decoder
from ..preview import render_preview


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="ALICE — décodage / inspection (.alice, .alz, .asp, images, scènes)")
    p.add_argument("files", nargs="+", help="Fichiers à charger")
    p.add_argument("--out", default=None, help="(Optionnel) dossier des aperçus PNG")
    p.add_argument("--size", type=int, default=None, help="Côté de l'aperçu (pixels)")
    add_logging_args(p)
    return p.parse_args(argv)


def describe(dec: Decoder) -> str:
    kind = dec.content_type.value
    if dec.alice_file is not None:
        af = dec.alice_file
        meta = ", ".join(f"{k}={v}" for k, v in af.metadata.to_dict().items())
        return (f"{kind} | {af.content_type_name()} | {af.equation_string()}"
                + (f" | {meta}" if meta else ""))
    if dec.sdf_content is not None:
        return f"{kind} | {dec.sdf_content.node_count} nodes | v{dec.sdf_content.version}"
    return f"{kind} | {type(dec.content).__name__}"


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(Path(args.log_file) if args.log_file else None, verbose=args.verbose)
    cfg = DecoderConfig.from_env(preview_size=args.size)

    out_dir = Path(args.out) if args.out else None
    if out_dir:
        ensure_dir(out_dir)
    ok = 0
    with Decoder(cfg) as dec:
        for i, f in enumerate(args.files, 1):
            p = Path(f)
            try:
                logging.info("[%d/%d] load: %s", i, len(args.files), p)
                dec.load(p)
                logging.info("→ %s | ratio %.1fx", describe(dec), dec.compression_ratio)
                if out_dir and dec.content is not None:
                    y = render_preview(dec.content, (cfg.preview_size, cfg.preview_size),
                                       max_iter=cfg.preview_max_iter)
                    dst = out_dir / f"{p.name.split('.')[0]}_preview.png"
                    Image.fromarray(to_u8(y)).save(dst)
                    logging.info("→ OK %s", dst)
                ok += 1
            except Exception as e:
                logging.exception("Échec chargement %s: %s", p, e)
    return 0 if ok == len(args.files) else 1


if __name__ == "__main__":
    sys.exit(main())
