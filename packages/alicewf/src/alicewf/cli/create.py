from __future__ import annotations
import argparse, logging, sys
from pathlib import Path

from alicecodec import AliceError, AliceFile, ContainerBuilder, write_alice
from alicecodec.container import to_q16

from .common import setup_logging, add_logging_args

# Valeurs de la démo : sortie typique d'un capteur de température embarqué
DEMO_SLOPE_Q16 = 32767          # ~0.5 en Q16.16
DEMO_INTERCEPT_Q16 = 163824115  # ~2499.76 en Q16.16
DEMO_SAMPLES = 1000
DEMO_TIMESTAMP = "2025-01-30T12:00:00Z"


def parse_args(argv=None):
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-o", "--output", default="output.alice", help="Fichier .alice de sortie")
    common.add_argument("--sensor-id", default=None, help="Métadonnée sensor_id")
    common.add_argument("--unit", default=None, help="Unité de mesure (ex: °C, m/s)")
    add_logging_args(common)

    p = argparse.ArgumentParser(description="ALICE — création de fichiers .alice")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("linear", parents=[common], help="Modèle linéaire (flottants → Q16.16)")
    s.add_argument("--slope", type=float, default=0.005)
    s.add_argument("--intercept", type=float, default=25.0)
    s.add_argument("--samples", type=int, default=1000)

    s = sub.add_parser("linear-q16", parents=[common], help="Modèle linéaire (Q16.16 bruts)")
    s.add_argument("--slope", type=int, default=32767)
    s.add_argument("--intercept", type=int, default=163840000)
    s.add_argument("--samples", type=int, default=1000)

    s = sub.add_parser("mandelbrot", parents=[common])
    s.add_argument("--iterations", type=int, default=256)
    s.add_argument("--cx", type=float, default=-0.75)
    s.add_argument("--cy", type=float, default=0.0)

    s = sub.add_parser("julia", parents=[common])
    s.add_argument("--iterations", type=int, default=256)
    s.add_argument("--cx", type=float, default=-0.7)
    s.add_argument("--cy", type=float, default=0.27)

    s = sub.add_parser("perlin", parents=[common])
    s.add_argument("--seed", type=int, default=12345)
    s.add_argument("--scale", type=float, default=5.0)
    s.add_argument("--octaves", type=int, default=6)

    s = sub.add_parser("demo", parents=[common], help="Fichier de démo (capteur TEMP-001)")
    s.add_argument("--timestamp", default=DEMO_TIMESTAMP)

    return p.parse_args(argv)


def _with_sensor_meta(b: ContainerBuilder, args) -> ContainerBuilder:
    if args.sensor_id is not None:
        b = b.sensor_id(args.sensor_id)
    if args.unit is not None:
        b = b.unit(args.unit)
    return b


def build_from_args(args) -> AliceFile:
    cmd = args.command
    if cmd == "linear":
        b = ContainerBuilder.from_linear(to_q16(args.slope), to_q16(args.intercept), args.samples)
        return _with_sensor_meta(b, args).build()
    if cmd == "linear-q16":
        b = ContainerBuilder.from_linear(args.slope, args.intercept, args.samples)
        return _with_sensor_meta(b, args).build()
    if cmd == "mandelbrot":
        return ContainerBuilder.mandelbrot(args.iterations, args.cx, args.cy).build()
    if cmd == "julia":
        return ContainerBuilder.julia(args.iterations, args.cx, args.cy).build()
    if cmd == "perlin":
        return ContainerBuilder.perlin(args.seed, args.scale, args.octaves).build()
    if cmd == "demo":
        b = ContainerBuilder.from_linear(DEMO_SLOPE_Q16, DEMO_INTERCEPT_Q16, DEMO_SAMPLES)
        b = b.sensor_id(args.sensor_id or "TEMP-001").unit(args.unit or "°C")
        return b.timestamp(args.timestamp).build()
    raise ValueError(f"Unknown command: {cmd}")


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(Path(args.log_file) if args.log_file else None, verbose=args.verbose)
    try:
        f = build_from_args(args)
        n = write_alice(args.output, f)
    except (AliceError, ValueError, OSError) as e:
        logging.error("Échec création %s: %s", args.output, e)
        return 1
    logging.info("Created: %s", args.output)
    logging.info("   Type: %s", f.content_type_name())
    logging.info("   Equation: %s", f.equation_string())
    logging.info("   Size: %d bytes", n)
    logging.info("   Compression: %.0fx", f.compression_ratio())
    return 0


if __name__ == "__main__":
    sys.exit(main())
