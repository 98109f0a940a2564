#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :
"""Everything that talks to, or writes for, the openssl executable."""

import contextlib
import logging
import shutil
import subprocess
import tempfile
from typing import NamedTuple

from .errors import OpenSSLError

OPENSSL = "openssl"
DAYS = "365"

LOG = logging.getLogger(name="ionicssl.openssl")

OPENSSL_CNF = """\
[req]
default_bits       = {bits}
distinguished_name = req_distinguished_name

[req_distinguished_name]
countryName                = {country_name}
stateOrProvinceName        = {state_or_province_name}
localityName               = {locality_name}
organizationName           = {organization_name}
commonName                 = {common_name}

[SAN]
subjectAltName=DNS:{common_name}
"""

# Subject attribs, in order.
SUBJECT_ATTRIBS = (
    ("C", "country_name"),
    ("ST", "state_or_province_name"),
    ("L", "locality_name"),
    ("O", "organization_name"),
    ("CN", "common_name"),
)


class ProcessResult(NamedTuple):
    returncode: int
    output: str


class SubprocessRunner(object):
    """Runs a command to completion, capturing stdout and stderr together"""

    def run(self, command, args, cwd=None):
        argv = [command] + list(args)
        LOG.debug("Running %s", " ".join(argv))
        try:
            proc = subprocess.run(
                argv,
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                universal_newlines=True,
            )
        except OSError as exc:
            raise OpenSSLError("Could not run {}: {}".format(command, exc))
        return ProcessResult(proc.returncode, proc.stdout or "")


def render_config(subject):
    """Render a SubjectConfig as an openssl req config"""
    return OPENSSL_CNF.format(**subject._asdict())


def format_subject(subject):
    """Render a SubjectConfig as a -subj argument, /C=../ST=../L=../O=../CN=.."""
    return "".join(
        "/{}={}".format(attrib, getattr(subject, field))
        for attrib, field in SUBJECT_ATTRIBS
    )


@contextlib.contextmanager
def temporary_config(subject):
    """Yields the path of a temporary file holding the rendered config, the
    file is removed when the block exits"""
    with tempfile.NamedTemporaryFile(
        mode="w", prefix="ionic-ssl-", suffix=".cnf", encoding="utf8"
    ) as cnf:
        cnf.write(render_config(subject))
        cnf.flush()
        LOG.debug("Wrote openssl config to %s", cnf.name)
        yield cnf.name


def req_arguments(subject, config_path, key_path, cert_path):
    """Arguments to `openssl` for a self-signed key & certificate"""
    return [
        "req",
        "-x509",
        "-newkey",
        "rsa:{}".format(subject.bits),
        "-nodes",
        "-subj",
        format_subject(subject),
        "-reqexts",
        "SAN",
        "-extensions",
        "SAN",
        "-config",
        config_path,
        "-days",
        DAYS,
        "-keyout",
        key_path,
        "-out",
        cert_path,
    ]


def check_for_openssl(which=shutil.which):
    """Returns the path of the openssl executable, raising if there is none"""
    path = which(OPENSSL)
    if path is None:
        raise OpenSSLError(
            "Cannot find an openssl executable! "
            "Please install OpenSSL and make sure it is on your PATH."
        )
    LOG.debug("Using openssl at %s", path)
    return path


def generate(subject, key_path, cert_path, runner=None):
    """Have openssl write a new key to key_path and a self-signed certificate
    to cert_path"""
    if runner is None:
        runner = SubprocessRunner()
    with temporary_config(subject) as config_path:
        args = req_arguments(subject, config_path, key_path, cert_path)
        result = runner.run(OPENSSL, args)
    if result.returncode != 0:
        raise OpenSSLError(
            "openssl exited with status {}".format(result.returncode),
            output=result.output,
        )
    LOG.debug("openssl output: %s", result.output)
    return result
