#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :
"""ionicssl.config is a helper library that standardizes and collects the logic
in one place used by the ionic_ssl CLI tools/scripts"""

import argparse
import logging
import os
from logging.config import dictConfig
from typing import NamedTuple

import plaster
import pyramid.paster as paster

ENV_PREFIX = "IONIC_SSL_"
SETTINGS_SECTION = "ionic_ssl"

DEFAULT_BITS = "2048"
DEFAULT_COUNTRY_NAME = "US"
DEFAULT_STATE_OR_PROVINCE_NAME = "Wisconsin"
DEFAULT_LOCALITY_NAME = "Madison"
DEFAULT_ORGANIZATION_NAME = "Ionic"
DEFAULT_COMMON_NAME = "localhost"

DEFAULT_KEY_FILE = os.path.join(".ionic", "ssl", "key.pem")
DEFAULT_CERT_FILE = os.path.join(".ionic", "ssl", "cert.pem")

LOG_LEVEL = {
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

DEFAULT_LOGGING_CONFIG = {
    "version": 1,
    "formatters": {
        "generic": {
            "format": "%(asctime)s %(levelname)-5.5s [%(name)s] %(message)s"
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "level": "NOTSET",
            "formatter": "generic",
        },
    },
    "loggers": {
        "": {  # root logger
            "handlers": ["console"],
            "level": "ERROR",
        },
        "ionicssl": {
            "level": "NOTSET",
            "qualname": "ionicssl",
        },
    },
}

# (argument dest, setting name, default), in the order they end up in a subject
SUBJECT_FIELDS = (
    ("country_name", "ssl.country_name", DEFAULT_COUNTRY_NAME),
    ("state_or_province_name", "ssl.state_or_province_name",
     DEFAULT_STATE_OR_PROVINCE_NAME),
    ("locality_name", "ssl.locality_name", DEFAULT_LOCALITY_NAME),
    ("organization_name", "ssl.organization_name", DEFAULT_ORGANIZATION_NAME),
    ("common_name", "ssl.common_name", DEFAULT_COMMON_NAME),
)


class SubjectConfig(NamedTuple):
    """Key size and subject fields of the certificate, all kept as text"""

    bits: str = DEFAULT_BITS
    country_name: str = DEFAULT_COUNTRY_NAME
    state_or_province_name: str = DEFAULT_STATE_OR_PROVINCE_NAME
    locality_name: str = DEFAULT_LOCALITY_NAME
    organization_name: str = DEFAULT_ORGANIZATION_NAME
    common_name: str = DEFAULT_COMMON_NAME


class Paths(NamedTuple):
    """Absolute destinations of the private key and the certificate"""

    key_path: str
    cert_path: str

    @property
    def key_dir(self):
        return os.path.dirname(self.key_path)

    @property
    def cert_dir(self):
        return os.path.dirname(self.cert_path)


def add_inifile_argument(parser, env=None):
    """Adds an argument to the parser for the settings-file, defaults to
    IONIC_SSL_INI in the environment"""
    if env is None:
        env = os.environ
    default_ini = env.get(ENV_PREFIX + "INI")

    parser.add_argument(
        "--ini",
        help="Path to a specific .ini-file to use as config",
        dest="inifile",
        default=default_ini,
        type=str,
    )


def add_verbosity_argument(parser):
    """Adds an argument for verbosity to a given parser, counting the amount of
    'v's and 'verbose' on the commandline"""
    parser.add_argument(
        "-v",
        "--verbose",
        help="Verbosity of root logger, increasing the more 'v's are added",
        action="count",
        default=0,
    )


def add_project_argument(parser):
    """Adds an argument for the directory to start looking for a project in"""
    parser.add_argument(
        "--project-dir",
        help="Directory to look for the project in, defaults to the current one",
        type=str,
    )


def add_path_arguments(parser):
    """Adds a key-path and cert-path argument to a given parser"""
    parser.add_argument(
        "--key-path",
        help="Destination of private key file (default: {})".format(
            DEFAULT_KEY_FILE
        ),
        type=str,
    )
    parser.add_argument(
        "--cert-path",
        help="Destination of certificate file (default: {})".format(
            DEFAULT_CERT_FILE
        ),
        type=str,
    )


def add_subject_arguments(parser):
    """Adds the key size and the subject fields of the certificate"""
    parser.add_argument(
        "-b",
        "--bits",
        help=f"Number of bits in the key (default: {DEFAULT_BITS})",
        type=str,
    )
    parser.add_argument(
        "--country-name",
        help="The country name (C) of the SSL certificate "
        f"(default: {DEFAULT_COUNTRY_NAME})",
        type=str,
    )
    parser.add_argument(
        "--state-or-province-name",
        help="The state or province name (ST) of the SSL certificate "
        f"(default: {DEFAULT_STATE_OR_PROVINCE_NAME})",
        type=str,
    )
    parser.add_argument(
        "--locality-name",
        help="The locality name (L) of the SSL certificate "
        f"(default: {DEFAULT_LOCALITY_NAME})",
        type=str,
    )
    parser.add_argument(
        "--organization-name",
        help="The organization name (O) of the SSL certificate "
        f"(default: {DEFAULT_ORGANIZATION_NAME})",
        type=str,
    )
    parser.add_argument(
        "--common-name",
        help="The common name (CN) of the SSL certificate "
        f"(default: {DEFAULT_COMMON_NAME})",
        type=str,
    )


def _get_config_value(
    arguments: argparse.Namespace,
    variable,
    required=False,
    setting_name=None,
    settings=None,
    default=None,
    env=None,
):
    """Returns what value to use for a given config variable, prefer argument >
    env-variable > config-file, if a value cant be found and default is not
    None, default is returned. Empty strings count as not set."""
    result = None
    if setting_name is None:
        setting_name = variable
    if settings is not None:
        result = settings.get(setting_name) or result

    if env is None:
        env = os.environ
    env_var = ENV_PREFIX + variable.upper().replace("-", "_")
    result = env.get(env_var) or result

    arg_value = getattr(arguments, variable, None)
    result = arg_value if arg_value else result

    if result is None:
        result = default

    if required and result is None:
        raise ValueError(
            f"No {variable} could be found as either an argument,"
            f" in the environment variable {env_var} or in the config file",
            variable,
            env_var,
        )
    return result


def get_subject_config(arguments: argparse.Namespace, settings=None, env=None):
    """Returns the SubjectConfig for the arguments, the environment and the
    settings, falling back to the defaults"""
    bits = _get_config_value(
        arguments,
        variable="bits",
        setting_name="ssl.bits",
        settings=settings,
        default=DEFAULT_BITS,
        env=env,
    )
    fields = {
        variable: str(
            _get_config_value(
                arguments,
                variable=variable,
                setting_name=setting_name,
                settings=settings,
                default=default,
                env=env,
            )
        )
        for variable, setting_name, default in SUBJECT_FIELDS
    }
    return SubjectConfig(bits=str(bits), **fields)


def get_paths(
    arguments: argparse.Namespace, project_dir, settings=None, env=None
):
    """Returns the absolute key and cert paths, defaulting to the .ionic/ssl
    directory of the project"""
    key_path = _get_config_value(
        arguments,
        variable="key_path",
        setting_name="ssl.key_path",
        settings=settings,
        default=os.path.join(project_dir, DEFAULT_KEY_FILE),
        env=env,
    )
    cert_path = _get_config_value(
        arguments,
        variable="cert_path",
        setting_name="ssl.cert_path",
        settings=settings,
        default=os.path.join(project_dir, DEFAULT_CERT_FILE),
        env=env,
    )
    return Paths(
        key_path=os.path.abspath(os.path.expanduser(key_path)),
        cert_path=os.path.abspath(os.path.expanduser(cert_path)),
    )


def get_log_level(argument_level, logger=None, env=None):
    """Calculates the highest verbosity(here inverted) from the argument,
    environment and root, capping it to between logging.DEBUG(10)-logging.ERROR(40),
    returning the log level"""

    if env is None:
        env = os.environ
    env_level_name = env.get(ENV_PREFIX + "LOG_LEVEL", "ERROR").upper()
    env_level = LOG_LEVEL.get(env_level_name, logging.ERROR)

    if logger is None:
        logger = logging.getLogger()
    current_level = logger.level

    argument_verbosity = logging.ERROR - argument_level * 10  # level steps are 10
    verbosity = min(argument_verbosity, env_level, current_level)
    log_level = (
        verbosity if logging.DEBUG <= verbosity <= logging.ERROR else logging.ERROR
    )
    return log_level


def configure_log_level(arguments: argparse.Namespace, logger=None):
    """Sets the root loggers level to the highest verbosity from the argument,
    environment and config-file"""
    log_level = get_log_level(arguments.verbose)
    if logger is None:
        logger = logging.getLogger()
    logger.setLevel(log_level)


def setup_logging(config_path=None):
    """wrapper for pyramid.paster.setup_logging using file at config_path, if
    no config_path is passed on use dictionary DEFAULT_LOGGING_CONFIG"""
    if config_path:
        paster.setup_logging(config_path)
    else:
        dictConfig(DEFAULT_LOGGING_CONFIG)


def get_settings(config_path, section=SETTINGS_SECTION):
    """Returns the [ionic_ssl] section of the settings file, or an empty dict
    when no config_path is given"""
    if config_path:
        return plaster.get_settings(config_path, section)
    return {}
