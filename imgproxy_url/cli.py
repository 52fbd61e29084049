"""
imgproxy-url CLI - Thin entrypoint for building and signing URLs.

Commands:
- build: Render a URL for a source image and processing flags
- sign: Print the signature for an already serialized path

Design Principles:
==================
- CLI is a dispatcher only; all rules live in the library
- Surface library errors verbatim
- Exit non-zero on failure

Exit Codes:
===========
- 0: Success
- 1: Option constraint violation (bad width, gravity, missing source...)
- 2: Decoding or configuration error (bad hex, partial environment)
"""

import argparse
import logging
import sys
from typing import Any, List, NoReturn, Optional, Sequence

from .config import SigningConfig
from .controls import (
    Endpoint,
    Format,
    FromEnvironment,
    Key,
    PlainSourceURL,
    Salt,
    SignatureSize,
    decode_hex,
)
from .errors import ConfigurationError, HexDecodeError, OptionError
from .gravity import FloatOffsets, Gravity, GravityType, IntegerOffsets
from .options import (
    AutoRotate,
    Background,
    BackgroundAlpha,
    Blur,
    Crop,
    Dpr,
    Enlarge,
    Extend,
    Filename,
    Height,
    MaxBytes,
    Padding,
    Presets,
    Quality,
    Raw,
    ResizingAlgorithm,
    ResizingFilter,
    ResizingMode,
    ResizingType,
    Rotate,
    Sharpen,
    Trim,
    Width,
)
from .signing import signature_for
from .url import ImgproxyURL

EXIT_OK = 0
EXIT_OPTION_ERROR = 1
EXIT_CONFIG_ERROR = 2

GRAVITY_CHOICES = [gravity_type.value for gravity_type in GravityType if gravity_type.value]


def _fail(code: int, message: str) -> NoReturn:
    print(f"ERROR: {message}", file=sys.stderr)
    sys.exit(code)


def _parse_gravity(values: Sequence[str]) -> Gravity:
    """
    Parse "TYPE [X Y]" into a Gravity.

    Offsets are floats for focus point gravity and integers otherwise.
    """
    if len(values) not in (1, 3):
        raise OptionError("g", "gravity takes TYPE or TYPE X Y")
    gravity_type = values[0]
    if gravity_type not in GRAVITY_CHOICES:
        raise OptionError("g", f"unknown gravity type {gravity_type!r}, expected one of: {', '.join(GRAVITY_CHOICES)}")
    if len(values) == 1:
        return Gravity(GravityType(gravity_type))
    try:
        if gravity_type == GravityType.FOCUS_POINT.value:
            offsets = FloatOffsets(float(values[1]), float(values[2]))
        else:
            offsets = IntegerOffsets(int(values[1]), int(values[2]))
    except ValueError:
        raise OptionError("g", f"invalid gravity offsets: {values[1]!r} {values[2]!r}") from None
    return Gravity(GravityType(gravity_type), offsets)


def _parse_background(value: str) -> Background:
    """Parse "R:G:B" or a hex color."""
    if ":" in value:
        try:
            channels = tuple(int(channel) for channel in value.split(":"))
        except ValueError:
            raise OptionError("bg", f"invalid rgb background: {value!r}") from None
        return Background(rgb=channels)
    return Background(hex_color=value)


def _parse_raw(value: str) -> Raw:
    """Parse "KEY" or "KEY:ARG:ARG..."."""
    key, _, arguments = value.partition(":")
    return Raw(key, arguments.split(":") if arguments else ())


def _build_options(args: argparse.Namespace) -> List[Any]:
    """Translate parsed flags into library options, in flag order."""
    options: List[Any] = []

    if args.width is not None:
        options.append(Width(args.width))
    if args.height is not None:
        options.append(Height(args.height))
    if args.resizing_type is not None:
        options.append(ResizingType(ResizingMode(args.resizing_type)))
    if args.resizing_algorithm is not None:
        options.append(ResizingAlgorithm(ResizingFilter(args.resizing_algorithm)))
    if args.dpr is not None:
        options.append(Dpr(args.dpr))
    if args.enlarge:
        options.append(Enlarge(True))
    if args.extend:
        gravity = _parse_gravity(args.extend_gravity) if args.extend_gravity else None
        options.append(Extend(True, gravity))
    if args.crop is not None:
        gravity = _parse_gravity(args.crop_gravity) if args.crop_gravity else None
        options.append(Crop(args.crop[0], args.crop[1], gravity))
    if args.gravity is not None:
        options.append(_parse_gravity(args.gravity))
    if args.padding is not None:
        if len(args.padding) > 4:
            raise OptionError("pd", "padding takes at most four values")
        options.append(Padding(*args.padding))
    if args.sharpen is not None:
        options.append(Sharpen(args.sharpen))
    if args.blur is not None:
        options.append(Blur(args.blur))
    if args.quality is not None:
        options.append(Quality(args.quality))
    if args.max_bytes is not None:
        options.append(MaxBytes(args.max_bytes))
    if args.background is not None:
        options.append(_parse_background(args.background))
    if args.background_alpha is not None:
        options.append(BackgroundAlpha(args.background_alpha))
    if args.preset:
        options.append(Presets(args.preset))
    if args.trim is not None:
        options.append(Trim(args.trim, args.trim_color, args.trim_equal_hor, args.trim_equal_ver))
    if args.rotate is not None:
        options.append(Rotate(args.rotate))
    if args.auto_rotate:
        options.append(AutoRotate(True))
    if args.filename is not None:
        options.append(Filename(args.filename))
    for raw in args.raw or []:
        options.append(_parse_raw(raw))

    # Source and signing controls
    if args.format:
        options.append(Format(args.format))
    if args.plain:
        options.append(PlainSourceURL(True))
    if args.env:
        options.append(FromEnvironment())
    if args.key is not None:
        options.append(Key(args.key))
    if args.salt is not None:
        options.append(Salt(args.salt))
    if args.signature_size is not None:
        options.append(SignatureSize(args.signature_size))
    if args.endpoint is not None:
        options.append(Endpoint(args.endpoint))

    return options


def cmd_build(args: argparse.Namespace) -> NoReturn:
    """
    Build a URL and print it to stdout.

    Exit codes:
        0: URL printed
        1: Option constraint violation
        2: Decoding or configuration error
    """
    try:
        options = _build_options(args)
        url = ImgproxyURL(source_url=args.source).with_options(*options)
        print(url.build())
    except OptionError as e:
        _fail(EXIT_OPTION_ERROR, str(e))
    except (HexDecodeError, ConfigurationError) as e:
        _fail(EXIT_CONFIG_ERROR, str(e))
    sys.exit(EXIT_OK)


def cmd_sign(args: argparse.Namespace) -> NoReturn:
    """
    Print the signature for a serialized path.

    Without key and salt the signature is "insecure".

    Exit codes:
        0: Signature printed
        1: Invalid signature size
        2: Decoding or configuration error
    """
    key: Optional[bytes] = None
    salt: Optional[bytes] = None
    signature_size = args.signature_size or 0

    try:
        if args.env:
            config = SigningConfig.from_env()
            config.to_options()  # rejects partial key/salt
            if config.key is not None:
                key = decode_hex("key", config.key)
                salt = decode_hex("salt", config.salt)
            if args.signature_size is None:
                signature_size = config.signature_size
        if args.key is not None:
            key = decode_hex("key", args.key)
        if args.salt is not None:
            salt = decode_hex("salt", args.salt)
    except (HexDecodeError, ConfigurationError) as e:
        _fail(EXIT_CONFIG_ERROR, str(e))

    if not 0 <= signature_size <= 32:
        _fail(EXIT_OPTION_ERROR, f"signature size must be within 0..32, got {signature_size}")

    path = args.path if args.path.startswith("/") else "/" + args.path
    print(signature_for(key, salt, path, signature_size))
    sys.exit(EXIT_OK)


def _add_signing_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--key', help='Hex-encoded signing key')
    parser.add_argument('--salt', help='Hex-encoded signing salt')
    parser.add_argument('--signature-size', type=int, help='Signature length in bytes (default: 32)')
    parser.add_argument(
        '--env',
        action='store_true',
        help='Read IMGPROXY_KEY / IMGPROXY_SALT / IMGPROXY_SIGNATURE_SIZE from the environment'
    )


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='imgproxy-url',
        description='Build and sign imgproxy URLs',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True, help='Command to execute')

    # Build command
    parser_build = subparsers.add_parser('build', help='Build a URL for a source image')
    parser_build.add_argument('source', help='Source image URL, e.g. s3://bucket/image.jpg')
    parser_build.add_argument('--width', type=int)
    parser_build.add_argument('--height', type=int)
    parser_build.add_argument('--resizing-type', choices=[mode.value for mode in ResizingMode])
    parser_build.add_argument('--resizing-algorithm', choices=[algorithm.value for algorithm in ResizingFilter])
    parser_build.add_argument('--dpr', type=int)
    parser_build.add_argument('--enlarge', action='store_true')
    parser_build.add_argument('--extend', action='store_true')
    parser_build.add_argument('--extend-gravity', nargs='+', metavar='ARG', help='TYPE [X Y]')
    parser_build.add_argument('--crop', nargs=2, type=float, metavar=('W', 'H'))
    parser_build.add_argument('--crop-gravity', nargs='+', metavar='ARG', help='TYPE [X Y]')
    parser_build.add_argument('--gravity', nargs='+', metavar='ARG', help='TYPE [X Y]')
    parser_build.add_argument('--padding', nargs='+', type=int, metavar='N', help='1-4 values, CSS order')
    parser_build.add_argument('--sharpen', type=float, metavar='SIGMA')
    parser_build.add_argument('--blur', type=int, metavar='SIGMA')
    parser_build.add_argument('--quality', type=int)
    parser_build.add_argument('--max-bytes', type=int)
    parser_build.add_argument('--background', help='Hex color or R:G:B')
    parser_build.add_argument('--background-alpha', type=float)
    parser_build.add_argument('--preset', action='append', help='Preset name (repeatable)')
    parser_build.add_argument('--trim', type=int, metavar='THRESHOLD')
    parser_build.add_argument('--trim-color')
    parser_build.add_argument('--trim-equal-hor', action='store_true')
    parser_build.add_argument('--trim-equal-ver', action='store_true')
    parser_build.add_argument('--rotate', type=int, metavar='ANGLE')
    parser_build.add_argument('--auto-rotate', action='store_true')
    parser_build.add_argument('--filename')
    parser_build.add_argument('--raw', action='append', metavar='KEY[:ARGS]', help='Raw option (repeatable)')
    parser_build.add_argument('--format', help='Output format, e.g. png')
    parser_build.add_argument('--plain', action='store_true', help='Plain source encoding')
    parser_build.add_argument('--endpoint', help='URL prefix, e.g. https://images.example.com')
    _add_signing_arguments(parser_build)
    parser_build.set_defaults(func=cmd_build)

    # Sign command
    parser_sign = subparsers.add_parser('sign', help='Print the signature for a serialized path')
    parser_sign.add_argument('path', help='Serialized path, e.g. /w:200/bG9jYWw6Ly8vaW1nLmpwZw')
    _add_signing_arguments(parser_sign)
    parser_sign.set_defaults(func=cmd_sign)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entrypoint.

    Parses arguments and dispatches to subcommands.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    args.func(args)


if __name__ == '__main__':
    main()
