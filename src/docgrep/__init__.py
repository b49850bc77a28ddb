"""docgrep: regular-expression search over Word documents and zip archives.

The package is organised as a small pipeline: :mod:`docgrep.io` discovers
candidate files, walks zip archives and extracts document text,
:mod:`docgrep.scan` finds matches with surrounding context and
:mod:`docgrep.report` renders the results.  The command line interface lives in
:mod:`docgrep.cli`.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
