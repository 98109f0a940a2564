#!/bin/env python3
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :
"""Developer tool to manage SSL keys & certificates of a project."""

import argparse
import logging
import sys

from ionicssl import config
from ionicssl.errors import SSLGenerateError
from ionicssl.generate import SSLGenerateCommand
from ionicssl.project import find_project

LOG = logging.getLogger(name="ionicssl.tool")

GENERATE_DESCRIPTION = """\
Uses OpenSSL to create a self-signed certificate for localhost (by default).

After the certificate is generated, you will still need to add it to your
system or browser as a trusted certificate.

The default directory for --key-path and --cert-path is .ionic/ssl/ of the
project.
"""


def cmdline(argv=None):
    """Parse commandline."""
    parser = argparse.ArgumentParser(prog="ionic_ssl")

    config.add_inifile_argument(parser)
    config.add_verbosity_argument(parser)

    commands = parser.add_subparsers(dest="command", metavar="command")
    commands.required = True

    generate = commands.add_parser(
        "generate",
        help="Generates an SSL key & certificate",
        description=GENERATE_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    config.add_project_argument(generate)
    config.add_path_arguments(generate)
    config.add_subject_arguments(generate)

    return parser.parse_args(argv)


def error_out(message, exc=None):
    """Print error message and exit with failure code."""
    LOG.error(message)
    if exc is not None:
        LOG.error(str(exc))
    sys.exit(1)


def generate(args, settings):
    command = SSLGenerateCommand(find_project(args.project_dir))
    try:
        command.run(args, settings)
    except SSLGenerateError as exc:
        error_out(str(exc))
    except OSError as exc:
        error_out("Could not write key & certificate", exc=exc)


COMMANDS = {
    "generate": generate,
}


def main(argv=None):
    """Entrypoint of application."""
    args = cmdline(argv)
    config.setup_logging(args.inifile)
    config.configure_log_level(args)
    settings = config.get_settings(args.inifile)

    COMMANDS[args.command](args, settings)


if __name__ == "__main__":
    main()
