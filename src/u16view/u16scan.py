import os
import sys
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import u16view.apptools
import u16view.timing
import u16view.utils
from u16view.buffers import NATIVE_UTF16, as_units, units_from_str
from u16view.flags import CaseSensitivity, SplitBehavior
from u16view.stringview import Utf16View

_BOMS = ((b'\xff\xfe', 'utf-16-le'), (b'\xfe\xff', 'utf-16-be'))


def add_arguments(cap):
    """Add the command line arguments that u16scan requires"""
    cap.add("filename", nargs="+", help="Files to inspect")
    cap.add(
        "--encoding",
        default="utf-16",
        help="Encoding of the input files. With utf-16 the byte order mark decides "
        "the byte order and files in the machine byte order are viewed without copying.",
    )
    cap.add(
        "--find",
        action="append",
        metavar="NEEDLE",
        help="Report the first index and the number of occurrences of NEEDLE. May be repeated.",
    )
    cap.add("--split", metavar="SEP", help="Report the parts of each file between occurrences of SEP")

    u16view.utils.add_flag_argument(
        parser=cap,
        name="case-sensitive",
        dest="case_sensitive",
        default=True,
        help="Match --find and --split case sensitively.",
    )
    u16view.utils.add_flag_argument(
        parser=cap,
        name="skip-empty-parts",
        dest="skip_empty_parts",
        default=False,
        help="Leave empty parts out of the --split report.",
    )
    u16view.utils.add_flag_argument(
        parser=cap,
        name="trim",
        default=False,
        help="Strip leading and trailing whitespace before inspecting.",
    )

    # Figure out what style classes are available and add them to the command
    # line options
    styles = [st[:-5].lower() for st in dict(globals()) if st.endswith("Style")]
    cap.add("--style", choices=styles, default="flat", help="Output formatting style")


def load_units(filename, encoding="utf-16") -> memoryview:
    """Read filename as a memoryview of 16-bit code units.

    Files in the machine byte order are viewed in place; anything else is
    decoded and re-encoded into a fresh buffer.
    """
    with open(filename, "rb") as f:
        raw = memoryview(f.read())

    codec = encoding.lower().replace("_", "-")
    if codec in ("utf-16", "utf16"):
        codec = NATIVE_UTF16
        for bom, bom_codec in _BOMS:
            if raw[:2] == bom:
                codec, raw = bom_codec, raw[2:]
                break

    if codec == NATIVE_UTF16 and len(raw) % 2 == 0:
        return as_units(raw)
    errors = "surrogatepass" if codec.startswith("utf-16") else "strict"
    return memoryview(units_from_str(str(raw, codec, errors)))


@dataclass
class ScanReport:
    filename: str
    units: int
    valid: bool
    right_to_left: bool
    finds: List[Tuple[str, int, int]] = field(default_factory=list)
    parts: Optional[List[str]] = None


class FlatStyle:
    def __call__(self, report):
        print(
            f"{report.filename}: units={report.units} valid={report.valid} "
            f"rtl={report.right_to_left}"
        )
        for needle, index, count in report.finds:
            print(f"{report.filename}: find {needle!r} index={index} count={count}")
        if report.parts is not None:
            print(f"{report.filename}: split {len(report.parts)} parts " + " ".join(repr(p) for p in report.parts))


class IndentStyle:
    def __call__(self, report):
        print(f"{report.filename}:")
        print(f"\tcode units: {report.units}")
        print(f"\tvalid utf-16: {report.valid}")
        print(f"\tright to left: {report.right_to_left}")
        for needle, index, count in report.finds:
            print(f"\tfind {needle!r}:")
            print(f"\t\tfirst index: {index}")
            print(f"\t\tcount: {count}")
        if report.parts is not None:
            print(f"\tparts ({len(report.parts)}):")
            for part in report.parts:
                print(f"\t\t{part!r}")


class NullStyle:
    def __call__(self, report):
        pass


class U16Scan:
    """Inspect files as views of 16-bit code units."""

    def __init__(self, args):
        self.args = args
        self.cs = CaseSensitivity.CASE_SENSITIVE if args.case_sensitive else CaseSensitivity.CASE_INSENSITIVE
        self.behavior = SplitBehavior.SKIP_EMPTY_PARTS if args.skip_empty_parts else SplitBehavior.KEEP_EMPTY_PARTS

    def scan(self, filename) -> ScanReport:
        with u16view.timing.time_file_operation("load", filename):
            units = load_units(filename, self.args.encoding)
        view = Utf16View(units)
        if self.args.trim:
            view = view.trimmed()
        if self.args.verbose >= 2:
            print(f"u16scan: {filename}: viewing {view.size()} code units", file=sys.stderr)
        if self.args.verbose >= 3:
            print(f"u16scan: {filename}: buffer of {len(units)} units, format {units.format!r}, "
                  f"readonly={units.readonly}", file=sys.stderr)

        with u16view.timing.time_file_operation("inspect", filename):
            report = ScanReport(
                filename=filename,
                units=view.size(),
                valid=view.is_valid_utf16(),
                right_to_left=view.is_right_to_left(),
            )
            for needle in self.args.find or []:
                report.finds.append((needle, view.index_of(needle, 0, self.cs), view.count(needle, self.cs)))
            if self.args.split is not None:
                report.parts = [str(part) for part in view.tokenize(self.args.split, self.behavior, self.cs)]
        return report

    def __call__(self, filenames, styleobj) -> int:
        """Scan every file and return the number that could not be read"""
        failures = 0
        for filename in u16view.utils.ordered_unique(filenames):
            try:
                report = self.scan(filename)
            except (OSError, UnicodeDecodeError, LookupError) as err:
                print(f"u16scan: {filename}: {err}", file=sys.stderr)
                failures += 1
                continue
            styleobj(report)
        return failures


def main(argv=None):
    cap = u16view.apptools.create_parser("Report on files viewed as UTF-16 code units")
    add_arguments(cap)
    args = u16view.apptools.parseargs(cap, argv)

    if args.verbose >= 1:
        print(f"u16scan: scanning {len(args.filename)} file(s) from {os.getcwd()}", file=sys.stderr)

    styleclass = globals()[args.style.title() + "Style"]
    scanner = U16Scan(args)
    with u16view.timing.time_operation("u16scan"):
        failures = scanner(args.filename, styleclass())
    u16view.timing.report_timing(args.verbose)

    if args.verbose >= 1:
        print(f"u16scan: {failures} file(s) failed", file=sys.stderr)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
