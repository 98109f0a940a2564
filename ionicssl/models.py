#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :

import OpenSSL.crypto as _crypto
from cryptography import x509 as _x509
from pyramid.decorator import reify as _reify


class KeyCertPair(object):
    """Data class to wrap a generated key + cert, for reporting on it.

    pyOpenSSL does the loading, everything read from the certificate goes
    through its cryptography counterpart."""
    def __init__(self, cert, key=None):
        self.key = None
        if key:
            self.key = _crypto.load_privatekey(_crypto.FILETYPE_PEM, key)
        self.cert = _crypto.load_certificate(_crypto.FILETYPE_PEM, cert)

    @classmethod
    def from_files(cls, certfile, keyfile=None):
        key = None
        if keyfile:
            with open(keyfile, "rt") as f:
                key = f.read()
        with open(certfile, "rt") as f:
            cert = f.read()

        return cls(cert, key)

    @_reify
    def x509(self):
        return self.cert.to_cryptography()

    @_reify
    def not_before(self):
        return self.x509.not_valid_before_utc

    @_reify
    def not_after(self):
        return self.x509.not_valid_after_utc

    @_reify
    def subject(self):
        return dict(
            (attr.rfc4514_attribute_name, attr.value)
            for attr in self.x509.subject
        )

    @property
    def self_signed(self):
        return self.x509.issuer == self.x509.subject

    @property
    def bits(self):
        return self.x509.public_key().key_size

    @_reify
    def dns_names(self):
        try:
            ext = self.x509.extensions.get_extension_for_class(
                _x509.SubjectAlternativeName
            )
        except _x509.ExtensionNotFound:
            return []
        return ext.value.get_values_for_type(_x509.DNSName)

    def key_matches(self):
        """True if the private key belongs to the certificate, False if it
        doesn't or there is no key"""
        if self.key is None:
            return False
        cert_public = self.x509.public_key()
        key_public = self.key.to_cryptography_key().public_key()
        return cert_public.public_numbers() == key_public.public_numbers()

    def __repr__(self):
        return "<{} CN={}>".format(
            self.__class__.__name__, self.subject.get("CN")
        )
