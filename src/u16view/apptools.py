"""Parser construction shared by the u16view command line tools.

Options can come from the command line, from config files and from
environment variables (U16VIEW_<OPTION>), in decreasing order of precedence.
"""

import os
import sys

import configargparse

import u16view.timing
import u16view.utils


def default_config_files(filename: str = "u16view.conf") -> list[str]:
    """System, user and working directory config files, lowest priority first."""
    return [
        os.path.join("/etc/xdg/u16view", filename),
        os.path.join(os.path.expanduser("~"), ".config", "u16view", filename),
        os.path.join(os.getcwd(), filename),
    ]


def add_common_arguments(cap):
    """Arguments every u16view tool understands"""
    cap.add(
        "-v",
        "--verbose",
        help="Output verbosity. Add more v's to make it more verbose",
        action="count",
        default=0,
    )
    cap.add(
        "-q",
        "--quiet",
        help="Decrement verbosity. Useful in apps where the default verbosity > 0.",
        action="count",
        default=0,
    )
    u16view.utils.add_boolean_argument(
        parser=cap,
        name="time",
        default=False,
        help="Report how long each operation took.",
    )


def create_parser(description, config_files=None):
    if config_files is None:
        config_files = default_config_files()
    cap = configargparse.ArgumentParser(
        description=description,
        formatter_class=configargparse.ArgumentDefaultsHelpFormatter,
        default_config_files=config_files,
        args_for_setting_config_path=["-c", "--config"],
        ignore_unknown_config_file_keys=True,
        auto_env_var_prefix="U16VIEW_",
    )
    add_common_arguments(cap)
    return cap


def parseargs(cap, argv=None):
    args = cap.parse_args(args=argv)
    args.verbose -= args.quiet
    u16view.timing.initialize_timer(enabled=args.time)
    if args.verbose >= 3:
        print(cap.format_values(), file=sys.stderr)
    return args
