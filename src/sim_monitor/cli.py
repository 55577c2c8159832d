"""sim-monitor CLI — Inspect a simulated machine with debugger expressions.

Usage:
    sim-monitor                            Empty machine, interactive console
    sim-monitor image.bin                  Load image at 0x100000, console
    sim-monitor -r eax=0x10 -e '$eax * 2'  Evaluate and print, then console
    sim-monitor -b -e '1 + 2'              Batch: evaluate and exit
"""

import argparse
import logging
import sys

from .errors import SimMonitorError, ExprError, MemoryAccessError
from .machine import Machine, IMAGE_START, PMEM_SIZE
from .monitor import Monitor


def _parse_int(text):
    try:
        return int(text, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: '{text}'")


def _parse_preset(text):
    """``NAME=VALUE`` register preset."""
    name, sep, value = text.partition('=')
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got '{text}'")
    return name.lstrip('$'), _parse_int(value)


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='sim-monitor',
        description='Evaluate debugger expressions against a simulated machine.',
        epilog="""Examples:
  sim-monitor prog.bin                     Load image, interactive console
  sim-monitor -r esp=0x7ffc -e '*$esp'     Read the word at the stack top
  sim-monitor -b -e '(1+2)*3' -e '1-2-3'   Batch evaluation""")

    parser.add_argument('image', nargs='?', default=None,
                        help='Raw binary image to load into memory')
    parser.add_argument('-a', '--addr', type=_parse_int, default=IMAGE_START,
                        help=f'Image load address (default: 0x{IMAGE_START:x})')
    parser.add_argument('-m', '--mem-size', type=_parse_int, default=PMEM_SIZE,
                        help=f'Physical memory size in bytes (default: 0x{PMEM_SIZE:x})')
    parser.add_argument('-r', '--reg', type=_parse_preset, action='append',
                        default=[], metavar='NAME=VALUE',
                        help='Preset a register (repeatable)')
    parser.add_argument('-e', '--expr', action='append', default=[],
                        help='Evaluate an expression and print it (repeatable)')
    parser.add_argument('-b', '--batch', action='store_true',
                        help='Exit after -e expressions instead of starting the console')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Trace tokenizer rule matches')

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.ERROR,
                        format='[%(name)s] %(message)s')

    try:
        return run(args)
    except SimMonitorError as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"\nUnexpected error: {type(e).__name__}: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 2


def build_machine(args) -> Machine:
    """Create the machine and apply the image and register presets."""
    machine = Machine(mem_size=args.mem_size)
    if args.image:
        n = machine.mem.load_file(args.image, args.addr)
        machine.regs.pc = args.addr
        print(f"Loaded: {args.image} ({n:,} bytes at 0x{args.addr:08x})")
    for name, value in args.reg:
        try:
            machine.regs.set(name, value)
        except KeyError:
            raise SimMonitorError(f"Unknown register '{name}'") from None
    return machine


def run(args) -> int:
    """Evaluate -e expressions, then hand over to the console."""
    machine = build_machine(args)

    for text in args.expr:
        try:
            value = machine.evaluate_or_raise(text)
        except (ExprError, MemoryAccessError) as e:
            raise SimMonitorError(f"'{text}': {e}") from e
        print(f"{text} = 0x{value:08x} ({value})")

    if args.batch:
        return 0
    return Monitor(machine).run()


if __name__ == '__main__':
    sys.exit(main())
