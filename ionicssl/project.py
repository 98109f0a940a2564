#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :
"""Locating the project a command runs in."""

import json
import logging
import os

PROJECT_FILE = "ionic.config.json"

LOG = logging.getLogger(name="ionicssl.project")


class Project(object):
    """A directory holding an ionic.config.json"""

    def __init__(self, directory):
        self.directory = os.path.abspath(directory)

    @property
    def config_file(self):
        return os.path.join(self.directory, PROJECT_FILE)

    @property
    def name(self):
        """The name from the project file, None if it can't be read"""
        try:
            with open(self.config_file, "rt") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            LOG.debug("Could not read %s: %s", self.config_file, exc)
            return None
        if isinstance(data, dict):
            return data.get("name")
        return None

    def __repr__(self):
        return "<{} {}>".format(self.__class__.__name__, self.directory)


def find_project(start=None):
    """Walks from start (default: cwd) up to the filesystem root, returning the
    first Project found or None"""
    current = os.path.abspath(start or os.getcwd())
    while True:
        if os.path.isfile(os.path.join(current, PROJECT_FILE)):
            return Project(current)
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent
