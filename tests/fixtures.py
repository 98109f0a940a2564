#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :

import datetime

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from ionicssl.openssl import ProcessResult

day = datetime.timedelta(days=1)
year = 365 * day                # close enough


def make_pair(common_name="localhost", bits=2048):
    """Returns (key_pem, cert_pem) of a self-signed pair, like openssl req
    -x509 would write it"""
    key = rsa.generate_private_key(public_exponent=65537, key_size=bits)
    name = x509.Name([
        x509.NameAttribute(NameOID.COUNTRY_NAME, "US"),
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + year)
        .add_extension(
            x509.SubjectAlternativeName([x509.DNSName(common_name)]),
            critical=False,
        )
        .sign(key, hashes.SHA256())
    )
    key_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    return key_pem, cert.public_bytes(serialization.Encoding.PEM)


_pairs = {}


def cached_pair(name="default"):
    """Key generation is slow, share pairs between tests"""
    if name not in _pairs:
        _pairs[name] = make_pair()
    return _pairs[name]


def fake_which(name):
    return "/usr/bin/" + name


def missing_which(name):
    return None


class ScriptedConfirm(object):
    """Answers confirmations from a list, remembering the questions"""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.questions = []

    def confirm(self, message):
        self.questions.append(message)
        return self.answers.pop(0)


class FakeOpenSSL(object):
    """Stands in for the process runner, writing a pair to -keyout/-out"""

    def __init__(self, returncode=0, output="", pair=None, write=True):
        self.returncode = returncode
        self.output = output
        self.pair = pair
        self.write = write
        self.calls = []
        self.configs = []

    def run(self, command, args, cwd=None):
        args = list(args)
        self.calls.append((command, args, cwd))
        with open(args[args.index("-config") + 1], "rt") as f:
            self.configs.append(f.read())
        if self.write and self.returncode == 0:
            key_pem, cert_pem = self.pair or cached_pair()
            with open(args[args.index("-keyout") + 1], "wb") as f:
                f.write(key_pem)
            with open(args[args.index("-out") + 1], "wb") as f:
                f.write(cert_pem)
        return ProcessResult(self.returncode, self.output)
