"""Package metadata and naming constants."""

PACKAGE_NAME = "resource-acctest"
__version__ = "0.1.0"
VERSION = __version__
DESCRIPTION = "Resource controllers and acceptance-test harness for AWS tape pools and placement groups"
