"""
libhtpasswd setup script
"""
#=============================================================================
# init script env -- ensure cwd = root of source dir
#=============================================================================
import os
root_dir = os.path.abspath(os.path.join(__file__, ".."))
os.chdir(root_dir)

#=============================================================================
# imports
#=============================================================================
from setuptools import setup, find_packages
import re
import sys

#=============================================================================
# init setup options
#=============================================================================
opts = {"cmdclass": {}}
args = sys.argv[1:]

#=============================================================================
# version string
#=============================================================================

# read version string without importing the package (needs passlib installed)
with open(os.path.join(root_dir, "libhtpasswd", "__init__.py")) as fh:
    version = re.search(r'^__version__ = "([^"]+)"', fh.read(), re.M).group(1)

#=============================================================================
# static text
#=============================================================================
SUMMARY = "read, verify & atomically rewrite apache htpasswd credential files"

DESCRIPTION = """\
libhtpasswd manages Apache style ``user:hash[:extra_info]`` credential files.
Records are looked up by a linear scan of the file, passwords are checked
against plaintext, DES crypt, apr1 md5-crypt & ``{SHA}`` hashes in a
configurable order, and every change is streamed into a temporary file which
replaces the original only once it is completely written.
"""

KEYWORDS = """\
password hash htpasswd apache
crypt md5-crypt apr1
"""

CLASSIFIERS = """\
Intended Audience :: Developers
License :: OSI Approved :: BSD License
Natural Language :: English
Operating System :: POSIX
Programming Language :: Python :: 3
Programming Language :: Python :: Implementation :: CPython
Programming Language :: Python :: Implementation :: PyPy
Topic :: Security
Topic :: Software Development :: Libraries
""".splitlines()

if '.dev' in version:
    CLASSIFIERS.append("Development Status :: 3 - Alpha")
else:
    CLASSIFIERS.append("Development Status :: 4 - Beta")

#=============================================================================
# run setup
#=============================================================================
setup(
    # package info
    packages=find_packages(root_dir, exclude=["tests", "tests.*"]),
    zip_safe=True,
    python_requires=">=3.9",

    # metadata
    name="libhtpasswd",
    version=version,
    license="BSD",

    description=SUMMARY,
    long_description=DESCRIPTION,
    keywords=KEYWORDS,
    classifiers=CLASSIFIERS,

    install_requires=[
        # provides the "passlib" package, used for the DES crypt primitive
        "libpass>=1.8",
        "typing_extensions>=4.0",
    ],
    extras_require={
        "test": "pytest>=7",
    },

    # extra opts
    script_args=args,
    **opts
)

#=============================================================================
# eof
#=============================================================================
