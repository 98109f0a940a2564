#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :
import argparse
import os
import tempfile
import unittest

from ionicssl.project import PROJECT_FILE, Project


def make_args(**kws):
    """Namespace as the generate subcommand would parse it"""
    names = ("project_dir", "key_path", "cert_path", "bits", "country_name",
             "state_or_province_name", "locality_name", "organization_name",
             "common_name")
    values = dict.fromkeys(names)
    values.update(kws)
    return argparse.Namespace(**values)


class ProjectTestCase(unittest.TestCase):
    """Runs every test in a fresh project directory"""

    def setUp(self):
        super(ProjectTestCase, self).setUp()
        self._tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmpdir.cleanup)
        self.root = os.path.realpath(self._tmpdir.name)
        self.project_dir = os.path.join(self.root, "myapp")
        os.mkdir(self.project_dir)
        with open(os.path.join(self.project_dir, PROJECT_FILE), "w") as f:
            f.write('{"name": "myapp", "type": "angular"}')
        self.project = Project(self.project_dir)
        self.ssl_dir = os.path.join(self.project_dir, ".ionic", "ssl")
        self.key_path = os.path.join(self.ssl_dir, "key.pem")
        self.cert_path = os.path.join(self.ssl_dir, "cert.pem")

    def write(self, path, content):
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            f.write(content)

    def read(self, path):
        with open(path, "r") as f:
            return f.read()
