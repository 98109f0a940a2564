from setuptools import setup, find_packages

requires = [
    "pyramid",
    "plaster_pastedeploy",
    "cryptography >= 42",
    "pyOpenSSL >= 24.0.0",
    # Transient dependency from pyramid->webob,
    # should be fixed in a later release of webob
    "legacy-cgi; python_version >= '3.13'"
]

setup(
    name="ionic-ssl",
    version="0.1.0",
    python_requires=">=3.7",
    description="Self-signed SSL keys & certificates for local development",
    long_description="""
ionic-ssl generates a self-signed key & certificate for serving a project
over https during local development. It collects the subject of the
certificate from command line options, the environment or an ini-file,
writes an OpenSSL request config and lets the openssl executable do the
cryptographic work.

The generated certificate still has to be added to your system or browser
as a trusted certificate.
      """,
    classifiers=[
        "Programming Language :: Python",
        "Environment :: Console",
        "Topic :: Security :: Cryptography",
        "Topic :: Software Development",
    ],
    keywords="ssl tls certificates x509 openssl self-signed development",
    packages=find_packages(exclude=["tests"]),
    include_package_data=True,
    zip_safe=False,
    test_suite="tests",
    install_requires=requires,
    entry_points="""\
      [console_scripts]
      ionic_ssl = ionicssl.scripts.tool:main
      """,
)
