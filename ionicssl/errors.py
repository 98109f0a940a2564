#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :


class SSLGenerateError(Exception):
    """Base for failures that abort ionic_ssl generate"""


class NotInProjectError(SSLGenerateError):
    pass


class OverwriteDeclinedError(SSLGenerateError):
    pass


class OpenSSLError(SSLGenerateError):
    """openssl is missing, failed, or wrote something unusable"""

    def __init__(self, message, output=""):
        super(OpenSSLError, self).__init__(message)
        self.output = output

    def __str__(self):
        message = super(OpenSSLError, self).__str__()
        if self.output:
            return "{}\n{}".format(message, self.output.rstrip())
        return message
