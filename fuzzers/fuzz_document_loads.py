#!/usr/bin/env python3
# pylint: disable=duplicate-code,import-error
"""A fuzzer for the snippet document parser."""

import sys

import atheris

with atheris.instrument_imports():
    from copypasta.errors import DeserializationError
    from copypasta.storage import document_loads


def test_one_input(data):
    """The entry point for the fuzzer."""
    fdp = atheris.FuzzedDataProvider(data)
    text = fdp.ConsumeUnicode(fdp.remaining_bytes())
    try:
        document_loads(text)
    except DeserializationError:
        # Malformed documents must surface only as DeserializationError.
        pass


def main():
    """Main function to run the fuzzer."""
    atheris.Setup(sys.argv, test_one_input)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
