#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :
import datetime
import os
import tempfile
import unittest
import warnings

import OpenSSL.crypto as _crypto

from ionicssl.models import KeyCertPair

from . import fixtures


class TestKeyCertPair(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        super(TestKeyCertPair, cls).setUpClass()
        cls.key_pem, cls.cert_pem = fixtures.cached_pair()

    def test_load(self):
        pair = KeyCertPair(self.cert_pem, self.key_pem)
        self.assertEqual(pair.subject, {"C": "US", "CN": "localhost"})
        self.assertEqual(pair.bits, 2048)
        self.assertEqual(pair.dns_names, ["localhost"])
        self.assertTrue(pair.self_signed)
        self.assertTrue(pair.key_matches())

    def test_validity(self):
        pair = KeyCertPair(self.cert_pem)
        self.assertIsInstance(pair.not_before, datetime.datetime)
        self.assertGreater(pair.not_after - pair.not_before, 364 * fixtures.day)

    def test_without_key(self):
        pair = KeyCertPair(self.cert_pem)
        self.assertIsNone(pair.key)
        self.assertFalse(pair.key_matches())

    def test_other_key(self):
        other_key, _ = fixtures.cached_pair("other")
        pair = KeyCertPair(self.cert_pem, other_key)
        self.assertFalse(pair.key_matches())

    def test_garbage(self):
        with self.assertRaises(_crypto.Error):
            KeyCertPair(b"-----BEGIN CERTIFICATE-----\nnope\n")

    def test_from_files(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            keyfile = os.path.join(tmpdir, "key.pem")
            certfile = os.path.join(tmpdir, "cert.pem")
            with open(keyfile, "wb") as f:
                f.write(self.key_pem)
            with open(certfile, "wb") as f:
                f.write(self.cert_pem)
            pair = KeyCertPair.from_files(certfile, keyfile)
        self.assertTrue(pair.key_matches())
        self.assertIn("localhost", repr(pair))

    def test_accessors_do_not_warn(self):
        pair = KeyCertPair(self.cert_pem, self.key_pem)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            pair.subject, pair.not_before, pair.not_after, pair.bits
            pair.self_signed, pair.dns_names, pair.key_matches()
        deprecations = [w for w in caught
                        if issubclass(w.category, DeprecationWarning)]
        self.assertEqual(deprecations, [])

    def test_validity_is_utc(self):
        pair = KeyCertPair(self.cert_pem)
        self.assertEqual(pair.not_after.utcoffset(), datetime.timedelta(0))
