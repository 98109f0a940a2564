#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :
"""Generating a self-signed key & certificate for local development.

The key and certificate are written by the openssl executable into temporary
files beside their destinations, and only moved into place once openssl
succeeded and both files could be read back. Existing files are therefore
never removed before a replacement exists, and a declined overwrite prompt
leaves everything as it was.
"""

import argparse
import contextlib
import logging
import os
import shutil
import tempfile

import OpenSSL.crypto as _crypto

from . import config, openssl
from .errors import NotInProjectError, OpenSSLError, OverwriteDeclinedError
from .models import KeyCertPair

LOG = logging.getLogger(name="ionicssl.generate")

DIRECTORY_MODE = 0o700
CERT_MODE = 0o644

YES = ("y", "yes")


def pretty_path(path):
    """Shortens path for display, relative to cwd or the home directory"""
    path = os.path.abspath(path)
    cwd = os.getcwd()
    home = os.path.expanduser("~")
    if path == cwd or path.startswith(cwd.rstrip(os.sep) + os.sep):
        return os.path.relpath(path, cwd)
    if home != "~" and path.startswith(home.rstrip(os.sep) + os.sep):
        return os.path.join("~", os.path.relpath(path, home))
    return path


class ConsoleConfirm(object):
    """Asks yes/no questions on the terminal, answering no by default"""

    def __init__(self, input_func=input):
        self.input_func = input_func

    def confirm(self, message):
        try:
            answer = self.input_func("{} [y/N]: ".format(message))
        except EOFError:
            return False
        return answer.strip().lower() in YES


def makedirs_private(path, mode=DIRECTORY_MODE):
    """Like os.makedirs, but every directory it creates gets mode, not only
    the last one"""
    missing = []
    while not os.path.exists(path):
        missing.append(path)
        parent = os.path.dirname(path)
        if parent == path:
            break
        path = parent
    for directory in reversed(missing):
        os.mkdir(directory, mode)
        os.chmod(directory, mode)


@contextlib.contextmanager
def staged_file(destination):
    """Yields a fresh temporary path in the directory of destination, removing
    it again unless it was moved away"""
    dirname, basename = os.path.split(destination)
    fd, path = tempfile.mkstemp(
        dir=dirname, prefix=".{}.".format(basename), suffix=".tmp"
    )
    os.close(fd)
    try:
        yield path
    finally:
        if os.path.exists(path):
            os.unlink(path)


class SSLGenerateCommand(object):
    """ionic_ssl generate

    project is the Project the command runs in (None when outside of one),
    confirmer answers the overwrite questions and runner executes openssl."""

    name = "ionic_ssl generate"

    def __init__(self, project, confirmer=None, runner=None, which=shutil.which,
                 out=print):
        self.project = project
        self.confirmer = confirmer if confirmer is not None else ConsoleConfirm()
        self.runner = runner if runner is not None else openssl.SubprocessRunner()
        self.which = which
        self.out = out

    def run(self, arguments: argparse.Namespace, settings=None, env=None):
        """Resolve options and generate, returns the resulting KeyCertPair"""
        if self.project is None:
            raise NotInProjectError(
                "Cannot run {} outside a project directory.".format(self.name)
            )
        LOG.debug("Project %s (%s)", self.project.name, self.project.directory)

        paths = config.get_paths(
            arguments, self.project.directory, settings=settings, env=env
        )
        subject = config.get_subject_config(arguments, settings=settings, env=env)
        return self.generate(paths, subject)

    def generate(self, paths, subject):
        openssl.check_for_openssl(self.which)

        self.ensure_directory(paths.key_dir)
        self.ensure_directory(paths.cert_dir)

        # Ask about both before touching either.
        self.check_existing_file(paths.key_path)
        self.check_existing_file(paths.cert_path)

        with staged_file(paths.key_path) as key_tmp, \
                staged_file(paths.cert_path) as cert_tmp:
            openssl.generate(subject, key_tmp, cert_tmp, runner=self.runner)
            pair = self.read_back(key_tmp, cert_tmp)
            os.chmod(cert_tmp, CERT_MODE)
            self.install(paths, key_tmp, cert_tmp)

        self.report(paths, pair)
        return pair

    @staticmethod
    def install(paths, key_tmp, cert_tmp):
        """Move the staged pair into place, key first. If the cert can't be
        moved the previous key (or no key) is put back."""
        with staged_file(paths.key_path) as key_backup:
            had_key = os.path.exists(paths.key_path)
            if had_key:
                shutil.copy2(paths.key_path, key_backup)
            os.replace(key_tmp, paths.key_path)
            try:
                os.replace(cert_tmp, paths.cert_path)
            except OSError:
                LOG.error("Could not move certificate to %s, restoring %s",
                          paths.cert_path, paths.key_path)
                if had_key:
                    os.replace(key_backup, paths.key_path)
                else:
                    os.unlink(paths.key_path)
                raise

    def ensure_directory(self, path):
        if not os.path.exists(path):
            makedirs_private(path)
            self.out("Created {} directory for you.".format(pretty_path(path)))

    def check_existing_file(self, path):
        """Returns True if path exists and may be overwritten, False if it
        doesn't exist. Raises if the user declines."""
        if not os.path.exists(path):
            return False
        message = "File {} exists. Overwrite?".format(pretty_path(path))
        if not self.confirmer.confirm(message):
            raise OverwriteDeclinedError(
                "Not overwriting {}.".format(pretty_path(path))
            )
        LOG.debug("Will overwrite %s", path)
        return True

    @staticmethod
    def read_back(key_path, cert_path):
        try:
            pair = KeyCertPair.from_files(cert_path, key_path)
        except (_crypto.Error, ValueError) as exc:
            raise OpenSSLError(
                "openssl wrote a key or certificate that can't be read",
                output=str(exc),
            )
        if not pair.key_matches():
            raise OpenSSLError("Generated key does not match the certificate")
        return pair

    def report(self, paths, pair):
        LOG.info("Subject: %s", pair.subject)
        LOG.info("Valid from %s to %s", pair.not_before, pair.not_after)
        LOG.info("Key size: %s bits, DNS names: %s",
                 pair.bits, ", ".join(pair.dns_names))
        self.out("")
        self.out(
            "Key:  {}\nCert: {}\n".format(
                pretty_path(paths.key_path), pretty_path(paths.cert_path)
            )
        )
        self.out("Generated key & certificate!")
