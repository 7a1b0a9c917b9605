#!/usr/bin/env python3
"""CLI for the TimeLog codec.

Usage examples:

  Encode an ISO-8601 date-time (UTC if no offset is given):

    timelog encode 2025-05-13T15:30:45Z
    timelog encode --hex "2025-05-13 17:30:45+02:00"

  Decode / render a packed value (decimal, 0x-hex or signed Int64):

    timelog decode 135913863085
    timelog render 0x1fa518f7ad

  Show the raw stored sub-fields (no validation):

    timelog fields 67108864

  Current time:

    timelog now

Defaults for the integer output format come from TIMELOG_OUTPUT_BASE and
TIMELOG_SIGNED_OUTPUT; explicit flags always win.
"""

from __future__ import annotations

import argparse
import logging

from timelog import decode, encode, now, render, split_fields
from timelog_config import Settings
from timelog_model import TimeLogError, to_int64

logger = logging.getLogger(__name__)


def _parse_tl(s: str) -> int:
    try:
        return int(s, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {s!r}") from None


def format_tl(tl: int, *, hex_out: bool, signed: bool) -> str:
    v = to_int64(tl) if signed else tl
    return f"{v:#x}" if hex_out else str(v)


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="timelog",
        description="Convert between packed TimeLog (Int64) values and UTC date-times.",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    def add_output_flags(p: argparse.ArgumentParser) -> None:
        p.add_argument("--hex", action="store_true", default=None, help="Print the value in hex")
        p.add_argument("--signed", action="store_true", default=None, help="Print the signed Int64 view")

    p_enc = sub.add_parser("encode", help="Encode an ISO-8601 date-time into a TimeLog")
    p_enc.add_argument("text", help="Date-time, e.g. 2025-05-13T15:30:45Z")
    add_output_flags(p_enc)

    p_dec = sub.add_parser("decode", help="Decode a TimeLog into its calendar fields")
    p_dec.add_argument("tl", type=_parse_tl, help="Packed value (decimal, 0x-hex or negative Int64)")

    p_ren = sub.add_parser("render", help="Render a TimeLog as YYYY-MM-DDTHH:MM:SS")
    p_ren.add_argument("tl", type=_parse_tl, help="Packed value (decimal, 0x-hex or negative Int64)")

    p_fld = sub.add_parser("fields", help="Show the raw stored sub-fields of a TimeLog")
    p_fld.add_argument("tl", type=_parse_tl, help="Packed value (decimal, 0x-hex or negative Int64)")

    p_now = sub.add_parser("now", help="Encode the current UTC time")
    add_output_flags(p_now)

    return ap


def _resolve_output(args: argparse.Namespace, settings: Settings) -> tuple[bool, bool]:
    hex_out = settings.output_base == "hex" if args.hex is None else args.hex
    signed = settings.signed_output if args.signed is None else args.signed
    return hex_out, signed


def _cmd_encode(args: argparse.Namespace, settings: Settings) -> int:
    tl = encode(args.text)
    if tl == 0:
        print(f"[error] cannot encode {args.text!r}")
        return 1
    hex_out, signed = _resolve_output(args, settings)
    print(format_tl(tl, hex_out=hex_out, signed=signed))
    return 0


def _cmd_decode(args: argparse.Namespace, settings: Settings) -> int:
    cv = decode(args.tl)
    if cv is None:
        print(f"[error] {args.tl} is not a valid TimeLog")
        return 1
    print(
        f"year={cv.year} month={cv.month} day={cv.day}"
        f" hour={cv.hour} minute={cv.minute} second={cv.second}"
    )
    print(cv.isoformat())
    return 0


def _cmd_render(args: argparse.Namespace, settings: Settings) -> int:
    text = render(args.tl)
    if not text:
        print(f"[error] {args.tl} is not a valid TimeLog")
        return 1
    print(text)
    return 0


def _cmd_fields(args: argparse.Namespace, settings: Settings) -> int:
    f = split_fields(args.tl)
    print(
        f"seconds={f.seconds} minutes={f.minutes} hours={f.hours}"
        f" day={f.day} month={f.month} year={f.year}"
    )
    print(f"valid={decode(args.tl) is not None}")
    return 0


def _cmd_now(args: argparse.Namespace, settings: Settings) -> int:
    hex_out, signed = _resolve_output(args, settings)
    print(format_tl(now(), hex_out=hex_out, signed=signed))
    return 0


_COMMANDS = {
    "encode": _cmd_encode,
    "decode": _cmd_decode,
    "render": _cmd_render,
    "fields": _cmd_fields,
    "now": _cmd_now,
}


def main(argv: list[str] | None = None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)

    try:
        # pydantic ValidationError is a ValueError
        settings = Settings()
        logging.basicConfig(
            level=settings.log_level.upper(),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
        logger.debug("command=%s settings=%r", args.cmd, settings)
        return _COMMANDS[args.cmd](args, settings)
    except (TimeLogError, ValueError) as e:
        print(f"[error] {e}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
