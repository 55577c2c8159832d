"""Interactive monitor console.

Commands:
    help [CMD]      List commands, or describe one
    q               Quit the monitor
    p EXPR          Evaluate EXPR and print it (hex and decimal)
    x N EXPR        Dump N 32-bit words starting at address EXPR
    info r          Print the register file
"""

import sys

from .errors import ExprError, MemoryAccessError

PROMPT = '(monitor) '


class Monitor:
    """Line-oriented debugger front end over a :class:`Machine`."""

    def __init__(self, machine, out=None):
        self.machine = machine
        self.out = out if out is not None else sys.stdout
        self.commands = {
            'help': (self.cmd_help, 'Display information about all supported commands'),
            'q': (self.cmd_q, 'Exit the monitor'),
            'p': (self.cmd_p, 'Evaluate an expression: p EXPR'),
            'x': (self.cmd_x, 'Scan memory: x N EXPR'),
            'info': (self.cmd_info, 'Print program state: info r'),
        }

    def _print(self, text=''):
        print(text, file=self.out)

    # ── Command loop ─────────────────────────────────────────────────

    def execute(self, line: str) -> bool:
        """Run one command line. Returns False when the monitor should exit."""
        line = line.strip()
        if not line:
            return True
        name, _, args = line.partition(' ')
        entry = self.commands.get(name)
        if entry is None:
            self._print(f"Unknown command '{name}'")
            return True
        return entry[0](args.strip())

    def run(self, stream=None) -> int:
        """Read-eval loop until ``q`` or end of input."""
        stream = stream if stream is not None else sys.stdin
        interactive = stream.isatty() if hasattr(stream, 'isatty') else False
        while True:
            if interactive:
                self.out.write(PROMPT)
                self.out.flush()
            line = stream.readline()
            if not line:
                return 0
            if not self.execute(line):
                return 0

    # ── Commands ─────────────────────────────────────────────────────

    def cmd_help(self, args):
        if not args:
            for name, (_, desc) in self.commands.items():
                self._print(f"{name} - {desc}")
        elif args in self.commands:
            self._print(f"{args} - {self.commands[args][1]}")
        else:
            self._print(f"Unknown command '{args}'")
        return True

    def cmd_q(self, args):
        return False

    def _eval(self, text):
        """Evaluate for a command; prints the diagnostic and returns None on failure."""
        try:
            return self.machine.evaluate_or_raise(text)
        except (ExprError, MemoryAccessError) as e:
            self._print(f"Error: {e}")
            return None

    def cmd_p(self, args):
        if not args:
            self._print("Usage: p EXPR")
            return True
        value = self._eval(args)
        if value is not None:
            self._print(f"0x{value:08x}\t{value}")
        return True

    def cmd_x(self, args):
        count_str, _, expr = args.partition(' ')
        if not count_str or not expr.strip():
            self._print("Usage: x N EXPR")
            return True
        try:
            count = int(count_str, 0)
        except ValueError:
            self._print(f"Bad count '{count_str}'")
            return True
        if count < 1:
            self._print("Usage: x N EXPR")
            return True
        addr = self._eval(expr)
        if addr is None:
            return True
        for i in range(count):
            a = addr + 4 * i
            try:
                word = self.machine.read_memory(a, 4)
            except MemoryAccessError as e:
                self._print(f"Error: {e}")
                break
            self._print(f"0x{a:08x}:\t0x{word:08x}")
        return True

    def cmd_info(self, args):
        if args != 'r':
            self._print("Usage: info r")
            return True
        for name, value in self.machine.regs.dump():
            self._print(f"{name:<4}0x{value:08x}\t{value}")
        return True
