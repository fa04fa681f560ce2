"""
Command-line entry point for toyc.

Compiles one source file and prints the resulting module, as LLVM IR by
default or as toyc's own IR with --emit ir.

Exit status: 0 when every unit compiled, 1 when some unit failed, 2 when
the source cannot be opened, 3 on a usage error or invalid option value,
4 when the output file cannot be written.
"""

import argparse
import logging
import sys

from . import __version__
from .backend.llvm_backend import LLVMBackend
from .config import CompilerConfig
from .driver import compile_file

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED_UNITS = 1
EXIT_NO_SOURCE = 2
EXIT_USAGE = 3
EXIT_NO_OUTPUT = 4


class ToycArgumentParser(argparse.ArgumentParser):
    """Argument parser whose usage errors exit with EXIT_USAGE."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = ToycArgumentParser(
        prog="toyc",
        description="Compile a toyc source file to LLVM IR",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    toyc program.toy                     # Print LLVM IR to stdout
    toyc program.toy -o program.ll       # Write LLVM IR to a file
    toyc program.toy --emit ir           # Print toyc IR instead
    toyc program.toy --int-bits 64 -v    # 64-bit integers, debug logging
        """
    )

    parser.add_argument('source', help='Source file to compile')
    parser.add_argument('-o', '--output',
                        help='Write the module here instead of stdout')
    parser.add_argument('--emit', choices=['llvm', 'ir'], default='llvm',
                        help='Output format (default: llvm)')

    # Compiler options
    parser.add_argument('--module-name', default=CompilerConfig.module_name,
                        help='Name of the generated module')
    parser.add_argument('--int-bits', type=int, default=CompilerConfig.int_bits,
                        help='Width of the integer type (default: 32)')
    parser.add_argument('--no-implicit-declarations', action='store_true',
                        help='Reject calls to functions that were never declared')

    # Logging options
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Only log errors')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    return parser


def configure_logging(verbose: bool, quiet: bool):
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv=None):
    """Main entry point for the toyc compiler"""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose, args.quiet)

    try:
        config = CompilerConfig(
            module_name=args.module_name,
            int_bits=args.int_bits,
            implicit_declarations=not args.no_implicit_declarations,
            filename=args.source,
        ).validate()
    except ValueError as e:
        parser.error(str(e))

    try:
        result = compile_file(args.source, config)
    except OSError:
        print(f"Could not open file: {args.source}", file=sys.stderr)
        sys.exit(EXIT_NO_SOURCE)

    for diagnostic in result.diagnostics:
        print(diagnostic, end="", file=sys.stderr)

    if args.emit == 'ir':
        text = str(result.module)
    else:
        backend = LLVMBackend(config)
        llvm_module = backend.generate(result.module)
        try:
            backend.verify(llvm_module)
        except RuntimeError as e:
            print(f"LLVM verification failed: {e}", file=sys.stderr)
            sys.exit(EXIT_FAILED_UNITS)
        text = backend.print_llvm_ir(llvm_module)

    if args.output:
        try:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(text)
        except OSError as e:
            logger.debug("writing %s failed: %s", args.output, e)
            print(f"Could not write file: {args.output}", file=sys.stderr)
            sys.exit(EXIT_NO_OUTPUT)
    else:
        sys.stdout.write(text)

    sys.exit(EXIT_FAILED_UNITS if result.has_errors() else EXIT_OK)


if __name__ == "__main__":
    main()
